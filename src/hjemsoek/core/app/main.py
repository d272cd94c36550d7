"""Hjemsøk entry point — ``python -m hjemsoek.core.app.main``."""

from __future__ import annotations

import json
import logging

from hjemsoek.core.app.app import create_app
from hjemsoek.core.config.settings import get_settings
from hjemsoek.domains.resettlement.connectors.mock_data import get_mock_group


def run() -> None:
    """Rank the sample group against the mock municipalities and print JSON."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.hjemsoek_log_level.upper(), logging.INFO))

    logger = logging.getLogger(__name__)
    app = create_app()
    template = app.template()
    group = get_mock_group()
    logger.info(
        "Ranking %d persons with template %s against %d municipalities",
        len(group.persons),
        template.id,
        len(app.provider.get_dataset()),
    )

    ranking = app.rank(group, template.id)
    output = {
        "template": template.id,
        "group": app.describe_group(group).full_text,
        "provenance": app.provider.get_provenance(),
        "ranking": [score.to_dict() for score in ranking],
    }
    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    run()
