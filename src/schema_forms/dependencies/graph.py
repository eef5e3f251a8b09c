"""
Dependency graph.

Tracks which fields take their options from another field's current value
and re-resolves those dependents whenever the driver changes.

Each dependent moves through Unresolved -> Loading -> Resolved | Failed.
Resolutions run as asyncio tasks. A new driver value supersedes any
resolution still in flight for the same dependent: every start bumps a
per-dependent sequence number and completions carrying an older number are
dropped, so a slow response for an old value can never overwrite newer
options.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping

from schema_forms.errors import ConfigurationError, DependencyResolutionError
from schema_forms.events import EventDispatcher, FormEventProcessor
from schema_forms.models.field_descriptor import FormSchema
from schema_forms.models.field_values import ChoiceOption, is_empty
from schema_forms.state.form_state import FormState, ResolutionState
from schema_forms.utils import call_with_timeout
from schema_forms.validation.rules import Validator

logger = logging.getLogger("schema-forms.dependencies")

# driver value -> [{id, text}, ...], sync or async
ChoiceSource = Callable[[Any], Iterable[Any] | Awaitable[Iterable[Any]]]

DEFAULT_OBJECT_ID_FIELD = "object_id"


@dataclass(frozen=True)
class DependencyLink:
    """
    The options of ``dependent`` depend on the value of ``driver``.

    ``content_type`` marks a content-type -> object pair, whose dependent
    stays hidden until the driver holds a value.
    """

    dependent: str
    driver: str
    content_type: bool = False


def links_from_schema(schema: FormSchema) -> list[DependencyLink]:
    """
    Collect the dependency links a schema declares.

    Besides explicit ``dependsOn`` entries, a content-type field drives its
    object picker: the schema's ``objectIdField`` for polymorphic schemas,
    or a sibling named ``object_id``.
    """
    links: dict[str, DependencyLink] = {}

    for name, descriptor in schema.properties.items():
        if descriptor.depends_on:
            links[name] = DependencyLink(dependent=name, driver=descriptor.depends_on)

    if schema.is_polymorphic and schema.content_type_field and schema.object_id_field:
        links.setdefault(
            schema.object_id_field,
            DependencyLink(
                dependent=schema.object_id_field,
                driver=schema.content_type_field,
                content_type=True,
            ),
        )

    for name, descriptor in schema.properties.items():
        if not descriptor.is_content_type_field:
            continue
        partner = DEFAULT_OBJECT_ID_FIELD
        if partner in schema.properties and partner != name and partner not in links:
            links[partner] = DependencyLink(dependent=partner, driver=name, content_type=True)

    return list(links.values())


class DependencyGraph:
    """Driver -> dependent links and their option resolution."""

    def __init__(
        self,
        state: FormState,
        fetch_choice_source: ChoiceSource | None = None,
        *,
        sources: Mapping[str, ChoiceSource] | None = None,
        timeout: float | None = None,
        events: FormEventProcessor | None = None,
        locale: str = "en",
    ):
        """
        Initialize the graph.

        Args:
            state: The form state dependents are resolved into.
            fetch_choice_source: Default option source for every dependent.
            sources: Per-dependent option sources overriding the default.
            timeout: Seconds before a resolution is marked failed.
            events: Processor notified about resolution progress.
            locale: Locale of the failure messages.
        """
        self._state = state
        self._fetch = fetch_choice_source
        self._sources = dict(sources or {})
        self._timeout = timeout
        self._events = events or EventDispatcher()
        self._messages = Validator(locale)

        self._links: dict[str, DependencyLink] = {}
        self._dependents: dict[str, list[str]] = {}
        self._sequence: dict[str, int] = {}
        self._pending: set[asyncio.Task] = set()

    @classmethod
    def from_schema(
        cls,
        schema: FormSchema,
        state: FormState,
        fetch_choice_source: ChoiceSource | None = None,
        **kwargs: Any,
    ) -> "DependencyGraph":
        """
        Build a graph with every link the schema declares.

        Raises:
            ConfigurationError: On unknown drivers, cycles, or dependents
                without an option source.
        """
        graph = cls(state, fetch_choice_source, **kwargs)
        for link in links_from_schema(schema):
            graph.register_dependency(
                link.dependent,
                link.driver,
                schedule=False,
                content_type=link.content_type,
            )
        return graph

    # Structure

    @property
    def links(self) -> list[DependencyLink]:
        return list(self._links.values())

    def link_of(self, dependent: str) -> DependencyLink | None:
        return self._links.get(dependent)

    def driver_of(self, dependent: str) -> str | None:
        link = self._links.get(dependent)
        return link.driver if link else None

    def dependents_of(self, driver: str) -> list[str]:
        return list(self._dependents.get(driver, []))

    def is_driver(self, name: str) -> bool:
        return bool(self._dependents.get(name))

    def register_dependency(
        self,
        dependent: str,
        driver: str,
        schedule: bool = True,
        content_type: bool = False,
    ) -> DependencyLink:
        """
        Link ``dependent`` to ``driver``.

        If the driver already holds a value and ``schedule`` is true, the
        dependent starts resolving right away (requires a running loop).

        Raises:
            ConfigurationError: If the link is unknown, conflicting, cyclic,
                or the dependent has no option source.
        """
        for name in (dependent, driver):
            if name not in self._state:
                raise ConfigurationError(
                    f"Dependency '{dependent}' -> '{driver}' names unknown field '{name}'",
                    field_name=name,
                )

        existing = self._links.get(dependent)
        if existing is not None:
            if existing.driver == driver:
                return existing
            raise ConfigurationError(
                f"Field '{dependent}' already depends on '{existing.driver}', "
                f"cannot also depend on '{driver}'",
                field_name=dependent,
            )

        self._check_cycle(dependent, driver)

        if self._fetch is None and dependent not in self._sources:
            raise ConfigurationError(
                f"Field '{dependent}' depends on '{driver}' but no option source was given",
                field_name=dependent,
            )

        link = DependencyLink(dependent=dependent, driver=driver, content_type=content_type)
        self._links[dependent] = link
        self._dependents.setdefault(driver, []).append(dependent)
        self._sequence.setdefault(dependent, 0)
        logger.debug(f"Registered dependency {dependent} -> {driver}")

        driver_value = self._state.get_value(driver)
        if schedule and not is_empty(driver_value):
            self._start(dependent, driver_value)
        return link

    def _check_cycle(self, dependent: str, driver: str) -> None:
        path = [dependent, driver]
        current = driver
        while current is not None:
            if current == dependent:
                raise ConfigurationError(
                    "Dependency cycle: " + " -> ".join(path),
                    field_name=dependent,
                )
            current = self.driver_of(current)
            if current is not None:
                path.append(current)

    # Resolution

    def on_driver_changed(self, driver: str, new_value: Any) -> list[asyncio.Task]:
        """
        Restart resolution of every dependent of ``driver``.

        Returns:
            The resolution tasks started (empty when the value is empty).
        """
        tasks = []
        for dependent in self.dependents_of(driver):
            task = self._start(dependent, new_value)
            if task is not None:
                tasks.append(task)
        return tasks

    def refresh(self) -> list[asyncio.Task]:
        """Resolve every dependent whose driver currently holds a value."""
        tasks = []
        for link in self._links.values():
            value = self._state.get_value(link.driver)
            if not is_empty(value):
                task = self._start(link.dependent, value)
                if task is not None:
                    tasks.append(task)
        return tasks

    def _start(self, dependent: str, driver_value: Any) -> asyncio.Task | None:
        self._sequence[dependent] = self._sequence.get(dependent, 0) + 1
        sequence = self._sequence[dependent]

        if is_empty(driver_value):
            self._state.set_options(dependent, None)
            self._set_resolution(dependent, ResolutionState.UNRESOLVED)
            self._state.record_error(dependent, None, show=False)
            self._clear_value(dependent)
            return None

        self._set_resolution(dependent, ResolutionState.LOADING)
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._resolve(dependent, driver_value, sequence))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _resolve(self, dependent: str, driver_value: Any, sequence: int) -> None:
        logger.debug(f"Resolving options of '{dependent}' for {driver_value!r} (#{sequence})")
        try:
            options = await self._fetch_options(dependent, driver_value)
        except asyncio.TimeoutError as exc:
            failure = DependencyResolutionError(
                self._messages.message("options_timeout"),
                dependent=dependent,
                driver_value=driver_value,
                original_error=exc,
                error_type="timeout",
            )
            options = None
        except Exception as exc:
            failure = DependencyResolutionError(
                self._messages.message("options_failed", reason=str(exc)),
                dependent=dependent,
                driver_value=driver_value,
                original_error=exc,
            )
            options = None
        else:
            failure = None

        if sequence != self._sequence.get(dependent):
            logger.debug(f"Dropping stale options of '{dependent}' for {driver_value!r} (#{sequence})")
            return

        if failure is not None:
            self._apply_failure(dependent, failure)
        else:
            self._apply_options(dependent, options)

    async def _fetch_options(self, dependent: str, driver_value: Any) -> list[ChoiceOption]:
        source = self._sources.get(dependent, self._fetch)
        items = await call_with_timeout(source, driver_value, timeout=self._timeout)
        return [ChoiceOption.from_source(item) for item in items or []]

    def _apply_options(self, dependent: str, options: list[ChoiceOption]) -> None:
        self._state.set_options(dependent, options)
        self._state.record_error(dependent, None, show=False)
        self._set_resolution(dependent, ResolutionState.RESOLVED)
        self._events.on_options_changed(dependent, options)

        valid = {str(option.value) for option in options}
        current = self._state.get_value(dependent)
        if isinstance(current, (list, tuple)):
            kept = [item for item in current if str(item) in valid]
            if len(kept) != len(current):
                self._replace_value(dependent, kept)
        elif not is_empty(current) and str(current) not in valid:
            self._clear_value(dependent)

    def _apply_failure(self, dependent: str, failure: DependencyResolutionError) -> None:
        logger.warning(f"Option resolution of '{dependent}' failed: {failure.original_error!r}")
        self._state.set_options(dependent, [])
        self._state.record_error(dependent, failure.message, show=True)
        self._set_resolution(dependent, ResolutionState.FAILED)
        self._events.on_options_changed(dependent, [])
        self._events.on_field_validated(dependent, failure.message, True)
        self._clear_value(dependent)

    def _clear_value(self, dependent: str) -> None:
        if not is_empty(self._state.get_value(dependent)):
            self._replace_value(dependent, None)

    def _replace_value(self, dependent: str, value: Any) -> None:
        self._state.set_value(dependent, value, touch=False)
        self._events.on_value_changed(dependent, value)
        # A dependent that drives other fields passes the change on
        self.on_driver_changed(dependent, value)

    def _set_resolution(self, dependent: str, resolution: ResolutionState) -> None:
        self._state.set_resolution_state(dependent, resolution)
        self._events.on_resolution_state(dependent, resolution.value)

    # Lifecycle

    @property
    def pending(self) -> int:
        """Number of resolutions still running."""
        return len(self._pending)

    async def wait_idle(self) -> None:
        """Wait until no resolution is running, including ones started meanwhile."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        """Invalidate and cancel every running resolution."""
        for dependent in self._sequence:
            self._sequence[dependent] += 1
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
