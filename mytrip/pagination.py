"""Infinite-scroll accumulation of result pages.

:class:`AccumulatorState` is an immutable value; every transition returns a
new one. :class:`InfiniteTours` owns the current value for one filter
configuration and serialises ``load_more`` calls so that only one page
request is ever in flight.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple

from .api import DEFAULT_PAGE_SIZE
from .filters import FilterState
from .loader import TourSource, load_tours
from .models import PetInfo, TourItem, TourPage

logger = logging.getLogger(__name__)

PageLoader = Callable[[FilterState, int], TourPage]
FiltersProvider = Callable[[], FilterState]


def _frozen_map(
    values: Mapping[str, Optional[PetInfo]]
) -> Mapping[str, Optional[PetInfo]]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class AccumulatorState:
    """Pages accumulated for one filter configuration."""

    items: Tuple[TourItem, ...] = ()
    pet_info: Mapping[str, Optional[PetInfo]] = field(
        default_factory=lambda: MappingProxyType({}))
    current_page: int = 1
    total_count: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    is_loading: bool = False
    last_error: Optional[BaseException] = None

    @property
    def has_more(self) -> bool:
        return self.current_page * self.page_size < self.total_count

    @classmethod
    def seeded(cls, page: TourPage) -> "AccumulatorState":
        return cls(
            items=tuple(page.items),
            pet_info=_frozen_map(page.pet_info),
            current_page=1,
            total_count=page.total_count,
            page_size=page.page_size,
        )

    def start_loading(self) -> "AccumulatorState":
        return dataclasses.replace(self, is_loading=True, last_error=None)

    def with_page(self, page: TourPage) -> "AccumulatorState":
        merged = dict(self.pet_info)
        merged.update(page.pet_info)
        return dataclasses.replace(
            self,
            items=self.items + tuple(page.items),
            pet_info=_frozen_map(merged),
            current_page=self.current_page + 1,
            total_count=page.total_count,
            is_loading=False,
            last_error=None,
        )

    def with_error(self, error: BaseException) -> "AccumulatorState":
        return dataclasses.replace(self, is_loading=False, last_error=error)


class InfiniteTours:
    """Idle/Loading state machine behind "load more" and infinite scroll."""

    def __init__(self,
                 loader: PageLoader,
                 filters_provider: FiltersProvider,
                 initial_page: TourPage,
                 filters: FilterState | None = None):
        self._loader = loader
        self._filters_provider = filters_provider
        self._lock = threading.Lock()
        self._generation = 0
        self._state = AccumulatorState.seeded(initial_page)
        self._configuration = (filters or filters_provider()).configuration_key()

    @classmethod
    def start(cls,
              source: TourSource,
              filters_provider: FiltersProvider,
              page_size: int = DEFAULT_PAGE_SIZE) -> "InfiniteTours":
        """Load the first page through ``source`` and seed the accumulator.

        A failure here propagates: there is nothing to show yet.
        """

        def loader(filters: FilterState, page_number: int) -> TourPage:
            return load_tours(source, filters, page_number, page_size=page_size)

        filters = filters_provider()
        initial_page = loader(filters, 1)
        return cls(loader, filters_provider, initial_page, filters=filters)

    @property
    def state(self) -> AccumulatorState:
        return self._state

    @property
    def items(self) -> Tuple[TourItem, ...]:
        return self._state.items

    @property
    def pet_info(self) -> Mapping[str, Optional[PetInfo]]:
        return self._state.pet_info

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> Optional[BaseException]:
        return self._state.last_error

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def total_count(self) -> int:
        return self._state.total_count

    def load_more(self) -> bool:
        """Fetch and append the next page.

        Returns ``False`` without doing anything while another page is
        loading or when every page has been loaded. A failure is stored in
        :attr:`error` and leaves the accumulated items untouched; calling
        again retries the same page.
        """
        with self._lock:
            state = self._state
            if state.is_loading:
                logger.debug("load_more ignored: a page is already loading")
                return False
            if not state.has_more:
                logger.debug("load_more ignored: all %d item(s) loaded",
                             state.total_count)
                return False
            generation = self._generation
            next_page = state.current_page + 1
            self._state = state.start_loading()

        try:
            filters = self._filters_provider()
            page = self._loader(filters, next_page)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to load page %d: %s", next_page, exc)
            self._finish(generation, next_page, error=exc)
            return True

        self._finish(generation, next_page, page=page)
        return True

    def _finish(self,
                generation: int,
                page_number: int,
                page: TourPage | None = None,
                error: BaseException | None = None) -> None:
        with self._lock:
            if generation != self._generation:
                logger.warning(
                    "Discarding page %d from a superseded configuration",
                    page_number)
                return
            if error is not None:
                self._state = self._state.with_error(error)
            else:
                self._state = self._state.with_page(page)
                logger.info("Loaded page %d: %d item(s) accumulated of %d",
                            page_number, len(self._state.items),
                            self._state.total_count)

    def reset(self,
              initial_page: TourPage,
              filters: FilterState | None = None) -> None:
        """Replace everything with a freshly loaded first page."""
        with self._lock:
            self._generation += 1
            self._state = AccumulatorState.seeded(initial_page)
            if filters is not None:
                self._configuration = filters.configuration_key()
        logger.info("Reset to %d item(s) of %d", len(initial_page.items),
                    initial_page.total_count)

    def sync(self,
             filters: FilterState,
             load_initial: Callable[[], TourPage] | None = None) -> bool:
        """Reset when ``filters`` select a different result set.

        Returns ``True`` when a reset happened.
        """
        if filters.configuration_key() == self._configuration:
            return False
        initial_page = (load_initial()
                        if load_initial is not None else self._loader(filters, 1))
        self.reset(initial_page, filters=filters)
        return True

    def snapshot(self) -> Mapping[str, Any]:
        state = self._state
        return {
            "items": len(state.items),
            "current_page": state.current_page,
            "total_count": state.total_count,
            "has_more": state.has_more,
            "is_loading": state.is_loading,
            "error": str(state.last_error) if state.last_error else None,
        }
