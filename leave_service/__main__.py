import uvicorn

from leave_service.core.config import settings

if __name__ == "__main__":
    uvicorn.run("leave_service.main:app", host=settings.HOST, port=settings.PORT)
