import uvicorn
from app.core.config import settings


def main():
    # Behind a reverse proxy the client address, and so the rate limit key,
    # comes from X-Forwarded-For sent by a trusted proxy.
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        proxy_headers=True,
        forwarded_allow_ips=settings.FORWARDED_ALLOW_IPS,
    )


if __name__ == "__main__":
    main()
