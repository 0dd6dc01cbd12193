from prometheus_fastapi_instrumentator import Instrumentator

from tasktimer import create_app
from tasktimer.core.config import settings
from tasktimer.core.logging import configure_logging

configure_logging()
app = create_app(settings)
Instrumentator().instrument(app).expose(app, include_in_schema=False)


def run() -> None:
    import uvicorn

    uvicorn.run("tasktimer.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
