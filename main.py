from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dsa_notebook.entries.routes import router as entries_router
from dsa_notebook.groups.routes import router as groups_router
from dsa_notebook.organization.routes import router as organization_router
from dsa_notebook.database.schema_setup import setup_mongodb_schemas
from dsa_notebook.database.mongo import close_client
from dsa_notebook.core.config import settings
import uvicorn

app = FastAPI(
    title="DSA Notebook API",
    description="Study entries and print folders for the DSA notebook",
    version="1.0.0"
)

@app.on_event("startup")
async def startup_event():
    """Initialize database schemas and indexes on startup"""
    await setup_mongodb_schemas()

@app.on_event("shutdown")
async def shutdown_event():
    """Release the MongoDB connection pool"""
    await close_client()


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entries_router)
app.include_router(groups_router)
app.include_router(organization_router)

@app.get("/")
async def root():
    return {"message": "DSA Notebook API is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
