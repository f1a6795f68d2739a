import uvicorn

from earbug_gchat import settings
from earbug_gchat.api.main import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
