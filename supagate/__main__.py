from supagate.config import Settings

if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "supagate.api:app", host=settings.host, port=settings.port, log_level="info"
    )
