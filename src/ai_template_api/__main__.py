"""Run the service: ``python -m ai_template_api``."""  # pragma: no cover

from __future__ import annotations  # pragma: no cover

import uvicorn  # pragma: no cover

from ai_template_api.app import create_app  # pragma: no cover
from ai_template_api.settings import TemplateSettings  # pragma: no cover


def main() -> None:  # pragma: no cover
    """Entry-point for the service."""
    settings = TemplateSettings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    main()
