from pathlib import Path
import re

from hydra.utils import instantiate, to_absolute_path
from omegaconf import DictConfig, ListConfig, OmegaConf


def _ref_resolver(path, *, _root_):
    """
    Instantiate the node at *path* once, store the instance back in the config
    and return it, so every ``${ref:...}`` to that node shares one object.

    ``layout::statistics_path`` reads an attribute of the instance and
    ``layout::ensure()`` calls a method.
    """
    path_parts = path.split("::")
    node_path = path_parts[0]
    node = OmegaConf.select(_root_, node_path)

    *prefixes, base = node_path.split(".")
    prefix = ".".join(prefixes)
    parent = OmegaConf.select(_root_, prefix) if prefixes else _root_

    if isinstance(node, (DictConfig, ListConfig)):
        instantiated_node = instantiate(node)
        parent[base] = instantiated_node
    else:
        instantiated_node = node

    for part in path_parts[1:]:
        match = re.fullmatch(r"(\w+)(\(\))?", part)
        if not match:
            raise ValueError(f"Invalid syntax in method chain: '{part}'")
        attr_name, is_call = match.groups()
        instantiated_node = getattr(instantiated_node, attr_name)
        if is_call:
            instantiated_node = instantiated_node()

    return instantiated_node


def register_resolvers() -> None:
    """Resolvers used by ``config/config.yaml``. Safe to call twice."""
    OmegaConf.register_new_resolver(
        "stem", lambda path: Path(str(path)).stem, replace=True
    )
    OmegaConf.register_new_resolver(
        "abspath", lambda path: to_absolute_path(str(path)), replace=True
    )
    OmegaConf.register_new_resolver("ref", _ref_resolver, replace=True)
