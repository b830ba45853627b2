import io
import logging
from typing import Any

import yaml

from ..core.ports import FrontmatterCodec

logger = logging.getLogger(__name__)


class YamlFrontmatter(FrontmatterCodec):
    def decode(self, text: str) -> dict[str, Any]:
        try:
            meta = yaml.safe_load(io.StringIO(text))
        except yaml.YAMLError as e:
            logger.debug("invalid front matter: %s", e)
            return {}
        # Front matter that is not a mapping carries no metadata.
        return meta if isinstance(meta, dict) else {}

