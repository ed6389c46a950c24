"""Navigation tree models.

A navigation config is a list of route groups (or dividers). Each group holds
route children, and a child may hold one more level of sub-children. Any
route can restrict who sees it:

- ``authorized_roles``: only these roles see the route.
- ``allowed_ojt_status``: trainees only see the route while their OJT status
  is one of these values. Other roles ignore this restriction.
"""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from sumikapp.core.models.domain.enums import OJTStatus, Role


class RouteSubChild(BaseModel):
    label: str
    path: str
    icon: Optional[str] = None
    end: bool = False
    authorized_roles: Optional[List[Role]] = None
    allowed_ojt_status: Optional[List[OJTStatus]] = None

    @property
    def is_restricted(self) -> bool:
        return self.authorized_roles is not None or self.allowed_ojt_status is not None


class RouteChild(RouteSubChild):
    children: List[RouteSubChild] = Field(default_factory=list)
    collapsible: bool = False
    collapsed: bool = False


class RouteGroup(BaseModel):
    label: str
    collapsible: bool = False
    collapsed: bool = False
    children: List[RouteChild] = Field(default_factory=list)


class Divider(BaseModel):
    divider: Literal[True] = True


class NavigationConfig(BaseModel):
    """A complete navigation tree plus its presentation hints."""

    style: Literal["custom", "sidebar", "header"] = "sidebar"
    sidebar_collapsed: bool = True
    sidebar_collapsed_style: Literal["offcanvas", "icon", "none"] = "icon"
    routes: List[Union[Divider, RouteGroup]] = Field(default_factory=list)
