import uvicorn

from .config import HOST, LOG_LEVEL, PORT, SSL_CERTFILE, SSL_KEYFILE

if __name__ == "__main__":
    ssl = {}
    if SSL_CERTFILE and SSL_KEYFILE:
        ssl = {"ssl_certfile": SSL_CERTFILE, "ssl_keyfile": SSL_KEYFILE}
    uvicorn.run("googol.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL, **ssl)
