"""
Navigation paths of the admin pages.

A host's router and the links the UI renders both come from here so the
two can never disagree.
"""

from typing import Any
from urllib.parse import quote

from ormadmin.policy.identity import type_name


class NavigationPaths:
    """
    Builds admin page paths.

    Example:
        paths = NavigationPaths(prefix="/admin")
        paths.edit(DemoDb, Person, 5)  # "/admin/DbContext/DemoDb/DbSet/Person/Edit/5"
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix.rstrip("/")

    def context_info(self, context: type | str) -> str:
        return f"{self.prefix}/DbContext/{type_name(context)}/Info"

    def set_list(self, context: type | str, record_type: type | str) -> str:
        return f"{self.prefix}/DbContext/{type_name(context)}/DbSet/{type_name(record_type)}"

    def create(self, context: type | str, record_type: type | str) -> str:
        return f"{self.set_list(context, record_type)}/Create"

    def edit(self, context: type | str, record_type: type | str, key: Any) -> str:
        return f"{self.set_list(context, record_type)}/Edit/{self._key(key)}"

    def delete(self, context: type | str, record_type: type | str, key: Any) -> str:
        return f"{self.set_list(context, record_type)}/Delete/{self._key(key)}"

    @staticmethod
    def _key(key: Any) -> str:
        return quote(str(key), safe="")
