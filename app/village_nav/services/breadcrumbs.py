from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from app.village_nav.domain.models import ROOT_HREF, BreadcrumbItem, NavigationItem, RoleNavigationMap
from app.village_nav.services.navigation import get_navigation_items_for_role

HOME_ID = "home"
ELLIPSIS_ID = "ellipsis"


@dataclass(frozen=True)
class HomeItem:
    label: str
    href: str
    icon: str | None = None


NAVIGATION_HOME = HomeItem(label="Home", href="/dashboard", icon="home")
URL_HOME = HomeItem(label="Home", href=ROOT_HREF, icon="home")


@dataclass(frozen=True)
class BreadcrumbConfig:
    """Display options for breadcrumb generation.

    ``show_icons`` and ``home_item`` left as ``None`` take the defaults of the
    generator they are passed to: navigation trails show icons and start at
    the dashboard, URL trails hide icons and start at the root path.
    """

    max_items: int = 6
    show_icons: bool | None = None
    separator: str = "/"
    make_clickable: bool = True
    home_item: HomeItem | None = None


@dataclass(frozen=True)
class AccessibleBreadcrumb:
    items: tuple[BreadcrumbItem, ...]
    aria_label: str
    schema_markup: dict


ELLIPSIS_ITEM = BreadcrumbItem(id=ELLIPSIS_ID, label="...", href="#", is_active=False, is_clickable=False)


def generate_breadcrumb_trail(
    current_path: str,
    user_role: str,
    config: BreadcrumbConfig | None = None,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> list[BreadcrumbItem]:
    config = config or BreadcrumbConfig()
    show_icons = True if config.show_icons is None else config.show_icons
    home = config.home_item or NAVIGATION_HOME

    trail = [
        BreadcrumbItem(
            id=HOME_ID,
            label=home.label,
            href=home.href,
            icon=home.icon if show_icons else None,
            is_active=current_path == home.href,
            is_clickable=config.make_clickable and current_path != home.href,
        )
    ]

    navigation_trail = find_breadcrumb_path(get_navigation_items_for_role(user_role, navigation), current_path)
    for index, item in enumerate(navigation_trail):
        is_last = index == len(navigation_trail) - 1
        trail.append(
            BreadcrumbItem(
                id=item.id,
                label=item.label,
                href=item.href,
                icon=item.icon if show_icons else None,
                is_active=item.href == current_path,
                is_clickable=config.make_clickable and not is_last,
                metadata=item.metadata,
            )
        )

    return truncate_breadcrumbs(trail, config.max_items)


def find_breadcrumb_path(
    items: Sequence[NavigationItem],
    current_path: str,
    trail: tuple[NavigationItem, ...] = (),
) -> list[NavigationItem]:
    for item in items:
        new_trail = (*trail, item)

        if item.href == current_path:
            return list(new_trail)

        if current_path.startswith(item.href) and item.href != ROOT_HREF:
            if item.children:
                child_trail = find_breadcrumb_path(item.children, current_path, new_trail)
                if child_trail:
                    return child_trail
            # No child matched: the prefix match ends the trail here.
            return list(new_trail)

        if item.children:
            child_trail = find_breadcrumb_path(item.children, current_path, new_trail)
            if child_trail:
                return child_trail

    return []


def truncate_breadcrumbs(trail: list[BreadcrumbItem], max_items: int) -> list[BreadcrumbItem]:
    if len(trail) <= max_items:
        return trail
    tail_size = max(max_items - 2, 0)
    tail = trail[-tail_size:] if tail_size else []
    return [trail[0], ELLIPSIS_ITEM, *tail]


def generate_breadcrumbs_from_url(url: str, config: BreadcrumbConfig | None = None) -> list[BreadcrumbItem]:
    config = config or BreadcrumbConfig()
    show_icons = False if config.show_icons is None else config.show_icons
    home = config.home_item or URL_HOME

    segments = [segment for segment in url.split("/") if segment]
    trail = [
        BreadcrumbItem(
            id=HOME_ID,
            label=home.label,
            href=home.href,
            icon=home.icon if show_icons else None,
            is_active=not segments,
            is_clickable=config.make_clickable and bool(segments),
        )
    ]

    current_path = ""
    for index, segment in enumerate(segments):
        current_path += f"/{segment}"
        is_last = index == len(segments) - 1
        trail.append(
            BreadcrumbItem(
                id=f"segment-{index}",
                label=format_segment_label(segment),
                href=current_path,
                is_active=is_last,
                is_clickable=config.make_clickable and not is_last,
            )
        )
    return trail


def format_segment_label(segment: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in segment.split("-"))


def generate_smart_breadcrumbs(
    current_path: str,
    user_role: str,
    config: BreadcrumbConfig | None = None,
    navigation: Mapping[str, RoleNavigationMap] | None = None,
) -> list[BreadcrumbItem]:
    navigation_breadcrumbs = generate_breadcrumb_trail(current_path, user_role, config, navigation)
    if len(navigation_breadcrumbs) <= 1:
        return generate_breadcrumbs_from_url(current_path, config)
    return navigation_breadcrumbs


def get_breadcrumb_schema(breadcrumbs: Sequence[BreadcrumbItem]) -> dict:
    visible = [item for item in breadcrumbs if item.id != ELLIPSIS_ID]
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": position,
                "name": item.label,
                "item": {"@type": "WebPage", "@id": item.href},
            }
            for position, item in enumerate(visible, start=1)
        ],
    }


def create_accessible_breadcrumb(
    breadcrumbs: Sequence[BreadcrumbItem],
    config: BreadcrumbConfig | None = None,
) -> AccessibleBreadcrumb:
    separator = (config or BreadcrumbConfig()).separator
    labels = f" {separator} ".join(item.label for item in breadcrumbs)
    return AccessibleBreadcrumb(
        items=tuple(breadcrumbs),
        aria_label=f"Breadcrumb navigation: {labels}",
        schema_markup=get_breadcrumb_schema(breadcrumbs),
    )


def get_parent_item(breadcrumbs: Sequence[BreadcrumbItem]) -> BreadcrumbItem | None:
    active_index = next((index for index, item in enumerate(breadcrumbs) if item.is_active), -1)
    return breadcrumbs[active_index - 1] if active_index > 0 else None


def get_clickable_items(breadcrumbs: Sequence[BreadcrumbItem]) -> list[BreadcrumbItem]:
    return [item for item in breadcrumbs if item.is_clickable]


def format_breadcrumb_text(breadcrumbs: Sequence[BreadcrumbItem], separator: str = " > ") -> str:
    return separator.join(item.label for item in breadcrumbs)


def is_truncated(breadcrumbs: Sequence[BreadcrumbItem]) -> bool:
    return any(item.id == ELLIPSIS_ID for item in breadcrumbs)


def get_depth(breadcrumbs: Sequence[BreadcrumbItem]) -> int:
    return sum(1 for item in breadcrumbs if item.id != ELLIPSIS_ID)
