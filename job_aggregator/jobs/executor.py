"""Search execution with progressive constraint relaxation on zero results."""

import copy
import enum
import logging
from collections.abc import Hashable
from typing import Any, Callable, Iterable, Optional

from job_aggregator.errors import UpstreamFailure, UpstreamTimeout

logger = logging.getLogger("job_aggregator.jobs.executor")


class RelaxationState(enum.Enum):
    INITIAL = "initial"
    RELAXING = "relaxing"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


def has_value(value: Any) -> bool:
    """None, empty lists, empty dicts and empty strings count as absent; False does not."""
    if value is None:
        return False
    if isinstance(value, (list, dict, str)) and len(value) == 0:
        return False
    return True


class RelaxationSearch:
    """State machine for one top-level search.

    initial -> (zero results) -> relaxing(i) -> ... -> exhausted
    any state -> (results) -> succeeded

    Each zero-result attempt removes the next relaxable field that is present in
    the working copy of the parameters. Fields listed in ``protected`` are never
    removed even if they appear in the relaxable list.
    """

    def __init__(
        self,
        params: dict[str, Any],
        relaxable_fields: Iterable[str],
        protected: Iterable[str] = (),
    ):
        protected = set(protected)
        self.params = copy.deepcopy(params)
        self.relaxable_fields = [f for f in relaxable_fields if f not in protected]
        self.state = RelaxationState.INITIAL
        self.field_index = -1
        self.removed: list[str] = []
        self.attempts = 0
        self.results: list[dict[str, Any]] = []

    @property
    def done(self) -> bool:
        return self.state in (RelaxationState.SUCCEEDED, RelaxationState.EXHAUSTED)

    def current_params(self) -> dict[str, Any]:
        return copy.deepcopy(self.params)

    def record(self, results: list[dict[str, Any]]) -> None:
        """Feed the outcome of the attempt made with current_params()."""
        if self.done:
            raise RuntimeError(f"Search already {self.state.value}")

        self.attempts += 1
        if results:
            self.results = results
            self.state = RelaxationState.SUCCEEDED
            return

        for index in range(self.field_index + 1, len(self.relaxable_fields)):
            name = self.relaxable_fields[index]
            if has_value(self.params.get(name)):
                del self.params[name]
                self.removed.append(name)
                self.field_index = index
                self.state = RelaxationState.RELAXING
                return

        self.field_index = len(self.relaxable_fields)
        self.state = RelaxationState.EXHAUSTED

    def abandon(self) -> None:
        """Stop without further attempts; the outcome is an empty result list."""
        self.results = []
        self.state = RelaxationState.EXHAUSTED


def search_with_retry(
    params: dict[str, Any],
    relaxable_fields: Iterable[str],
    run_search: Callable[[dict[str, Any]], list[dict[str, Any]]],
    protected: Iterable[str] = (),
    label: str = "search",
) -> list[dict[str, Any]]:
    """Run a search, relaxing one field per zero-result attempt until something is found.

    Makes at most len(relaxable_fields) + 1 calls to run_search. A timeout or a
    non-credential upstream failure ends the search with no results; credential
    errors propagate.
    """
    search = RelaxationSearch(params, relaxable_fields, protected)

    while not search.done:
        try:
            results = run_search(search.current_params())
        except UpstreamTimeout as e:
            logger.warning("%s: %s, treating as no results", label, e)
            search.abandon()
            break
        except UpstreamFailure as e:
            logger.error("%s: %s, treating as no results", label, e)
            search.abandon()
            break

        search.record(results)
        if search.state is RelaxationState.RELAXING:
            logger.info("%s: no results, retry #%d without %s", label, len(search.removed), search.removed[-1])

    if search.state is RelaxationState.SUCCEEDED:
        if search.removed:
            logger.info("%s: found %d results after removing %s", label, len(search.results), ", ".join(search.removed))
        else:
            logger.info("%s: found %d results", label, len(search.results))
    elif search.removed:
        logger.info("%s: no results even after removing %s", label, ", ".join(search.removed))
    else:
        logger.info("%s: no results", label)

    return search.results


def dedupe_by_key(
    items: list[dict[str, Any]],
    key: Callable[[dict[str, Any]], Optional[Any]],
) -> list[dict[str, Any]]:
    """Exact-match dedup on an identity key; first occurrence wins, order kept.

    Items with no key, or an unhashable one, are kept as-is.
    """
    seen = set()
    unique = []
    for item in items:
        identity = key(item)
        if identity is None or identity == "" or not isinstance(identity, Hashable):
            unique.append(item)
            continue
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(item)
    return unique
