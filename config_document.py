"""
Config Document — Discourse Setup Kit
=====================================
Line-preserving model of a container config (containers/app.yml).

The sample template ships most settings as disabled placeholders:

  env:
    DISCOURSE_HOSTNAME: 'discourse.example.com'
    #DISCOURSE_SMTP_USER_NAME: user@example.com      # required

and optional template inclusions as disabled list items:

  #- "templates/web.ssl.template.yml"

A `#` directly in front of a key or `-` marks a disabled entry. Any other
comment (`## text`, `# text`) is left alone. Updates go through set() and
enable_item(), which report whether the entry existed, so a placeholder that
is missing from the template can never be mistaken for a successful write.
"""
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import yaml
except ImportError:
    print("pyyaml not installed. Run: pip install -e .")
    sys.exit(1)

_SETTING = re.compile(r"^(?P<indent>\s*)(?P<off>#?)(?P<key>[A-Za-z_][A-Za-z0-9_]*):(?P<rest>.*)$")
_ITEM    = re.compile(r"^(?P<indent>\s*)(?P<off>#?)- (?P<rest>.*)$")


@dataclass
class Line:
    text: str
    indent: str = ""
    key: str | None = None
    item: str | None = None
    disabled: bool = False


def format_scalar(value: Any, quote: bool = False) -> str:
    """Render a value so that yaml.safe_load reads back exactly the same thing.

    With quote=True plain strings are double-quoted, as the template writes
    sizes like "256MB".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    text = str(value)
    if quote and not any(c in text for c in "\"\\\n"):
        return f'"{text}"'
    try:
        if text and yaml.safe_load(text) == text and "\n" not in text:
            return text
    except yaml.YAMLError:
        pass
    return "'" + text.replace("'", "''") + "'"


def _load_scalar(raw: str) -> Any:
    try:
        return yaml.safe_load(f"v: {raw}")["v"]
    except (yaml.YAMLError, TypeError):
        return raw.strip()


class ConfigDocument:
    """Ordered lines of a YAML config, addressable by setting name."""

    def __init__(self, lines: list[Line]):
        self.lines = lines

    # ── parsing ───────────────────────────────────────────────
    @classmethod
    def parse(cls, text: str) -> "ConfigDocument":
        lines = []
        for raw in text.splitlines(keepends=True):
            body = raw.rstrip("\r\n")
            m = _SETTING.match(body)
            if m:
                lines.append(Line(raw, m["indent"], key=m["key"], disabled=bool(m["off"])))
                continue
            m = _ITEM.match(body)
            if m:
                item = _load_scalar(m["rest"])
                lines.append(Line(raw, m["indent"], item=str(item), disabled=bool(m["off"])))
                continue
            lines.append(Line(raw))
        return cls(lines)

    @classmethod
    def load(cls, path: Path) -> "ConfigDocument":
        return cls.parse(Path(path).read_text())

    def render(self) -> str:
        return "".join(l.text for l in self.lines)

    def save(self, path: Path) -> Path:
        Path(path).write_text(self.render())
        return Path(path)

    # ── lookup ────────────────────────────────────────────────
    def _find(self, key: str) -> Line | None:
        # An enabled line wins over a disabled placeholder of the same name.
        found = None
        for line in self.lines:
            if line.key == key:
                if not line.disabled:
                    return line
                found = found or line
        return found

    def keys(self) -> list[str]:
        return [l.key for l in self.lines if l.key is not None]

    def __contains__(self, key: str) -> bool:
        return self._find(key) is not None

    def is_disabled(self, key: str) -> bool:
        line = self._find(key)
        return line is not None and line.disabled

    def get(self, key: str, include_disabled: bool = False) -> Any:
        """Value of `key`, or None if it is absent (or disabled, unless asked)."""
        line = self._find(key)
        if line is None or (line.disabled and not include_disabled):
            return None
        body = line.text.rstrip("\r\n")
        _, _, rest = body.partition(f"{key}:")
        return _load_scalar(rest)

    # ── updates ───────────────────────────────────────────────
    def set(self, key: str, value: Any, only_disabled: bool = False, quote: bool = False) -> bool:
        """
        Write `key: value` over the existing line for `key` and enable it.

        Returns False when the key is not in the document, or when
        only_disabled is set and the key has already been enabled.
        """
        line = self._find(key)
        if line is None or (only_disabled and not line.disabled):
            return False
        eol = line.text[len(line.text.rstrip("\r\n")):] or "\n"
        line.text = f"{line.indent}{key}: {format_scalar(value, quote)}{eol}"
        line.disabled = False
        return True

    def enable_item(self, value: str) -> bool:
        """Uncomment the list item `value`. False if there is no such item."""
        for line in self.lines:
            if line.item != value:
                continue
            if line.disabled:
                body = line.text.rstrip("\r\n")
                eol = line.text[len(body):]
                line.text = f"{line.indent}{body[len(line.indent) + 1:]}{eol}"
                line.disabled = False
            return True
        return False
