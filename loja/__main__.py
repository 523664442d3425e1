"""Run the API with uvicorn: `python -m loja`.

Equivalent to `uvicorn loja.app:create_app --factory --port $PORT`; the app
is only built once uvicorn starts, never at import time.
"""

import uvicorn

from loja.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("loja.app:create_app", factory=True, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
