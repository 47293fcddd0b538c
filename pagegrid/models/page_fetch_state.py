"""Per-page fetch state as an immutable snapshot plus transition functions."""

from dataclasses import dataclass, field, replace
from enum import Enum


class PageStatus(Enum):
    UNREQUESTED = 'unrequested'
    LOADING = 'loading'
    FETCHED = 'fetched'
    ERRORED = 'errored'


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class PageFetchState:
    """
    Tracking sets for page fetches.

    A page index sits in at most one of `loading`, `fetched` and `errored`;
    absence from all three means the page was never requested (or was
    re-armed by a retry).
    """
    loading: frozenset = field(default_factory=frozenset)
    fetched: frozenset = field(default_factory=frozenset)
    errored: frozenset = field(default_factory=frozenset)

    def status(self, page_index: int) -> PageStatus:
        if page_index in self.loading:
            return PageStatus.LOADING
        if page_index in self.fetched:
            return PageStatus.FETCHED
        if page_index in self.errored:
            return PageStatus.ERRORED
        return PageStatus.UNREQUESTED

    def is_unrequested(self, page_index: int) -> bool:
        return self.status(page_index) is PageStatus.UNREQUESTED


def _expect(state: PageFetchState, page_index: int, expected: PageStatus,
            action: str):
    actual = state.status(page_index)
    if actual is not expected:
        raise InvalidTransition(
            f'Cannot {action} page {page_index}: it is {actual.value}, '
            f'expected {expected.value}')


def request_page(state: PageFetchState, page_index: int) -> PageFetchState:
    """unrequested -> loading"""
    _expect(state, page_index, PageStatus.UNREQUESTED, 'request')
    return replace(state, loading=state.loading | {page_index})


def complete_page(state: PageFetchState, page_index: int) -> PageFetchState:
    """loading -> fetched"""
    _expect(state, page_index, PageStatus.LOADING, 'complete')
    return replace(state,
                   loading=state.loading - {page_index},
                   fetched=state.fetched | {page_index})


def fail_page(state: PageFetchState, page_index: int) -> PageFetchState:
    """loading -> errored"""
    _expect(state, page_index, PageStatus.LOADING, 'fail')
    return replace(state,
                   loading=state.loading - {page_index},
                   errored=state.errored | {page_index})


def retry_page(state: PageFetchState, page_index: int) -> PageFetchState:
    """errored -> unrequested. Does not fetch by itself."""
    _expect(state, page_index, PageStatus.ERRORED, 'retry')
    return replace(state, errored=state.errored - {page_index})
