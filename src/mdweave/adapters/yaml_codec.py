import re, io
import yaml
from typing import Any
from ..core.ports import FrontmatterCodec

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


class YamlFrontmatter(FrontmatterCodec):
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _FM.match(text)
        if not m:
            return {}, text
        try:
            fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        except yaml.YAMLError:
            # unparseable block is left in the body as-is
            return {}, text
        if not isinstance(fm, dict):
            return {}, text
        return fm, text[m.end() :]
