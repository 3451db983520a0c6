from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentda.api.routes.agenda import router as agenda_router
from agentda.api.routes.ai import router as ai_router
from agentda.api.routes.scheduling import router as scheduling_router

app = FastAPI(
    title="Agentda API",
    description="Collaborative meeting agendas: AI suggestions, summaries and scheduling",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
    ],
    allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining"],
)

app.include_router(ai_router)
app.include_router(scheduling_router)
app.include_router(agenda_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


def main() -> None:
    import uvicorn

    from agentda.config import settings

    uvicorn.run("agentda.api.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
