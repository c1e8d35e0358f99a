"""
Class-name composition for templates.

`cn()` flattens strings, lists and {class: condition} dicts, then resolves
conflicting utility classes so the one given last wins:

    cn("p-4", "p-8")                    -> "p-8"
    cn("px-2 py-1", "p-4")              -> "p-4"
    cn("base", None, "end")             -> "base end"
    cn({"active": True, "idle": False}) -> "active"
"""
import re
from typing import Any, Dict, List, Optional, Tuple

_SIZES = r"(xs|sm|base|md|lg|xl|\dxl)"

# Ordered: the first matching pattern decides the group of a class
_GROUPS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("display", re.compile(r"^(block|inline-block|inline|flex|inline-flex|grid|inline-grid|contents|table|hidden|flow-root)$")),
    ("position", re.compile(r"^(static|fixed|absolute|relative|sticky)$")),
    ("flex-direction", re.compile(r"^flex-(row|row-reverse|col|col-reverse)$")),
    ("flex-wrap", re.compile(r"^flex-(wrap|wrap-reverse|nowrap)$")),
    ("flex", re.compile(r"^flex-(1|auto|initial|none)$")),
    ("p", re.compile(r"^p-.+")),
    ("px", re.compile(r"^px-.+")),
    ("py", re.compile(r"^py-.+")),
    ("pt", re.compile(r"^pt-.+")),
    ("pr", re.compile(r"^pr-.+")),
    ("pb", re.compile(r"^pb-.+")),
    ("pl", re.compile(r"^pl-.+")),
    ("m", re.compile(r"^-?m-.+")),
    ("mx", re.compile(r"^-?mx-.+")),
    ("my", re.compile(r"^-?my-.+")),
    ("mt", re.compile(r"^-?mt-.+")),
    ("mr", re.compile(r"^-?mr-.+")),
    ("mb", re.compile(r"^-?mb-.+")),
    ("ml", re.compile(r"^-?ml-.+")),
    ("gap", re.compile(r"^gap-(?!x-|y-).+")),
    ("gap-x", re.compile(r"^gap-x-.+")),
    ("gap-y", re.compile(r"^gap-y-.+")),
    ("size", re.compile(r"^size-.+")),
    ("w", re.compile(r"^w-.+")),
    ("min-w", re.compile(r"^min-w-.+")),
    ("max-w", re.compile(r"^max-w-.+")),
    ("h", re.compile(r"^h-.+")),
    ("min-h", re.compile(r"^min-h-.+")),
    ("max-h", re.compile(r"^max-h-.+")),
    ("font-size", re.compile(r"^text-" + _SIZES + r"$")),
    ("text-align", re.compile(r"^text-(left|center|right|justify|start|end)$")),
    ("text-color", re.compile(r"^text-.+")),
    ("font-weight", re.compile(r"^font-(thin|extralight|light|normal|medium|semibold|bold|extrabold|black)$")),
    ("bg-color", re.compile(r"^bg-.+")),
    ("rounded", re.compile(r"^rounded(-(none|sm|md|lg|xl|\dxl|full))?$")),
    ("border-width", re.compile(r"^border(-\d+)?$")),
    ("border-color", re.compile(r"^border-.+")),
    ("shadow", re.compile(r"^shadow(-.+)?$")),
    ("opacity", re.compile(r"^opacity-.+")),
    ("z", re.compile(r"^z-.+")),
    ("justify", re.compile(r"^justify-.+")),
    ("items", re.compile(r"^items-.+")),
    ("leading", re.compile(r"^leading-.+")),
    ("tracking", re.compile(r"^tracking-.+")),
    ("overflow", re.compile(r"^overflow-(auto|hidden|clip|visible|scroll)$")),
    ("cursor", re.compile(r"^cursor-.+")),
]

# A class in the key group also overrides every class in the listed groups
_CONFLICTS: Dict[str, Tuple[str, ...]] = {
    "p": ("px", "py", "pt", "pr", "pb", "pl"),
    "px": ("pr", "pl"),
    "py": ("pt", "pb"),
    "m": ("mx", "my", "mt", "mr", "mb", "ml"),
    "mx": ("mr", "ml"),
    "my": ("mt", "mb"),
    "gap": ("gap-x", "gap-y"),
    "size": ("w", "h"),
}


def _flatten(value: Any, out: List[str]) -> None:
    if not value:
        return
    if isinstance(value, str):
        out.extend(value.split())
    elif isinstance(value, dict):
        out.extend(name for name, enabled in value.items() if enabled)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _flatten(item, out)
    else:
        out.append(str(value))


def _group_of(base: str) -> Optional[str]:
    for name, pattern in _GROUPS:
        if pattern.match(base):
            return name
    return None


def merge_classes(classes: List[str]) -> List[str]:
    """Drop classes overridden by a later class of the same utility group"""
    seen = set()
    kept: List[str] = []

    for cls in reversed(classes):
        # "hover:md:!p-4" -> modifiers "hover:md:", important "!", base "p-4"
        *modifiers, base = cls.split(":")
        prefix = ":".join(sorted(modifiers))
        important = base.startswith("!")
        group = _group_of(base.lstrip("!"))

        if group is None:
            kept.append(cls)
            continue

        key = (prefix, important, group)
        if key in seen:
            continue
        seen.add(key)
        for other in _CONFLICTS.get(group, ()):
            seen.add((prefix, important, other))
        kept.append(cls)

    kept.reverse()
    return kept


def cn(*inputs: Any) -> str:
    """Compose class names: conditional inclusion plus utility conflict resolution"""
    classes: List[str] = []
    for value in inputs:
        _flatten(value, classes)
    return " ".join(merge_classes(classes))
