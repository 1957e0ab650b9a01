"""
SAM Template Lookup

Load a SAM template (YAML) and map event fixture names to the logical ids of
the functions they exercise. CloudFormation intrinsic functions (!Sub, !Ref,
etc.) are accepted so that real templates parse.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

CODE_URI_KEY = "CodeUri"
# Resources.<LogicalId>.Properties.CodeUri: the logical id sits two keys above.
RESOURCE_KEY_OFFSET = 2

_CFN_TAGS = (
    "!Ref",
    "!Sub",
    "!GetAtt",
    "!GetAZs",
    "!ImportValue",
    "!If",
    "!Join",
    "!Select",
    "!Split",
    "!FindInMap",
    "!Base64",
    "!Cidr",
    "!Condition",
    "!Equals",
    "!And",
    "!Or",
    "!Not",
)


class CfnLoader(yaml.SafeLoader):
    """YAML loader that handles CloudFormation intrinsic functions."""

    pass


def cfn_constructor(loader: yaml.Loader, node: yaml.Node) -> Any:
    """Constructor for CloudFormation tags."""
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node)
    elif isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node)
    return ""


for tag in _CFN_TAGS:
    yaml.add_constructor(tag, cfn_constructor, Loader=CfnLoader)


def parse_template(content: str) -> Any:
    """Parse template YAML text. Empty documents yield an empty mapping."""
    data = yaml.load(content, Loader=CfnLoader)
    return {} if data is None else data


def load_template(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return parse_template(f.read())


def iter_function_names(
    tree: Any, code_uri: str, parents: tuple[str, ...] = ()
) -> Iterator[str]:
    """
    Yield logical ids of resources whose CodeUri ends with ``code_uri``.

    Traversal is depth-first over mappings only, in document order. A CodeUri
    nested deeper than ``Properties`` under its resource is not attributed to
    the right logical id.
    """
    if not isinstance(tree, dict):
        return
    for key, value in tree.items():
        if key == CODE_URI_KEY and isinstance(value, str) and value.endswith(code_uri):
            if len(parents) >= RESOURCE_KEY_OFFSET:
                yield parents[-RESOURCE_KEY_OFFSET]
        yield from iter_function_names(value, code_uri, (*parents, key))


def find_function_name(tree: Any, code_uri: str) -> str | None:
    """Return the first logical id whose CodeUri ends with ``code_uri``."""
    return next(iter_function_names(tree, code_uri), None)
