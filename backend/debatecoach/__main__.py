# python -m debatecoach
import uvicorn

from debatecoach.config import Settings

if __name__ == "__main__":
    settings = Settings.from_env()
    uvicorn.run("debatecoach.main:app", host=settings.host, port=settings.port)
