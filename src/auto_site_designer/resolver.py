from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .catalog import DEFAULT_CATALOG, ComponentCatalog, Severity
from .errors import ContentUnavailable
from .models.business import BusinessDataContext, is_present


@dataclass(frozen=True)
class ContentResolution:
    component_type: str
    can_render: bool
    missing_critical: tuple[str, ...] = ()
    missing_important: tuple[str, ...] = ()
    missing_optional: tuple[str, ...] = ()
    from_data: tuple[str, ...] = ()
    from_fallback: tuple[str, ...] = ()
    values: Mapping[str, Any] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        """True when any content came from fallbacks or is missing outright."""
        return bool(self.from_fallback or self.missing_critical or self.missing_important)


def render_fallback(value: Any, business_name: str) -> Any:
    if isinstance(value, str):
        return value.replace("{business_name}", business_name)
    if isinstance(value, list):
        return [render_fallback(item, business_name) for item in value]
    if isinstance(value, dict):
        return {key: render_fallback(item, business_name) for key, item in value.items()}
    return value


def resolve(
    component_type: str,
    business_context: BusinessDataContext,
    catalog: ComponentCatalog = DEFAULT_CATALOG,
) -> ContentResolution:
    """Check whether ``component_type`` can render from data or fallbacks.

    Data wins over fallback. The context is only read.
    """
    definition = catalog.get(component_type)
    if definition is None:
        return ContentResolution(component_type, can_render=False, missing_critical=("<unknown component>",))

    missing: dict[Severity, list[str]] = {severity: [] for severity in Severity}
    from_data: list[str] = []
    from_fallback: list[str] = []
    values: dict[str, Any] = {}
    business_name = business_context.business_name

    for requirement in definition.requirements:
        if requirement.source:
            data = business_context.lookup(requirement.source)
            if is_present(data):
                values[requirement.field] = data
                from_data.append(requirement.field)
                continue
        if is_present(requirement.fallback):
            values[requirement.field] = render_fallback(requirement.fallback, business_name)
            from_fallback.append(requirement.field)
            continue
        missing[requirement.severity].append(requirement.field)

    return ContentResolution(
        component_type=component_type,
        can_render=not missing[Severity.critical],
        missing_critical=tuple(missing[Severity.critical]),
        missing_important=tuple(missing[Severity.important]),
        missing_optional=tuple(missing[Severity.optional]),
        from_data=tuple(from_data),
        from_fallback=tuple(from_fallback),
        values=values,
    )


def require(
    component_type: str,
    business_context: BusinessDataContext,
    catalog: ComponentCatalog = DEFAULT_CATALOG,
) -> ContentResolution:
    resolution = resolve(component_type, business_context, catalog)
    if not resolution.can_render:
        raise ContentUnavailable(component_type, resolution.missing_critical)
    return resolution


__all__ = ["ContentResolution", "render_fallback", "require", "resolve"]
