import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from quizbuilder.config import settings
from quizbuilder.routes import alternatives, exercises, modules

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title=settings.app_name, version="1.0.0", description="API for authoring quiz modules, exercises and alternatives")

# CORS middleware for cross-origin requests (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with prefixes and tags
app.include_router(modules.router, prefix="/companies", tags=["Modules"])
app.include_router(exercises.router, prefix="/modules", tags=["Exercises"])
app.include_router(alternatives.router, prefix="/exercises", tags=["Alternatives"])

# Root endpoint
@app.get("/")
async def root():
    return {"message": "Welcome to Quizbuilder API", "version": app.version}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("quizbuilder.main:app", host="0.0.0.0", port=8000, reload=True)
