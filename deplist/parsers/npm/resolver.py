"""Map module specifiers to npm package names."""

from typing import Optional


def is_local_specifier(specifier: str) -> bool:
    """Relative (``./x``, ``../x``, ``.``) or absolute (``/x``) module paths."""
    return specifier.startswith(".") or specifier.startswith("/")


def resolve_package_name(specifier: str) -> Optional[str]:
    """Resolve a module specifier to the package that provides it.

    Sub-path imports collapse to their package (``lodash/fp/map`` ->
    ``lodash``, ``@babel/core/lib/x`` -> ``@babel/core``). Scoped names keep
    their leading ``@`` (``@scope/pkg``, never ``scope/pkg``) so the result
    is a name ``npm install`` accepts. A scoped specifier without a package
    segment (``@scope``) is returned unchanged.

    Args:
        specifier: Module specifier as written in source.

    Returns:
        Optional[str]: Package name, or None for local modules.
    """
    if not specifier or is_local_specifier(specifier):
        return None

    parts = specifier.split("/")
    if specifier.startswith("@"):
        return f"{parts[0]}/{parts[1]}" if len(parts) >= 2 else specifier
    return parts[0]


__all__ = ["is_local_specifier", "resolve_package_name"]
