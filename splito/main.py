import logging
from fastapi import FastAPI
from splito.core.config import settings
from splito.api.v1.routes.system import router as system_router
from splito.api.v1.routes.splits import router as splits_router
from splito.api.v1.routes.balances import router as balances_router
from splito.api.v1.routes.receipts import router as receipts_router

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(splits_router, prefix="/api/v1/splits")
app.include_router(balances_router, prefix="/api/v1/balances")
app.include_router(receipts_router, prefix="/api/v1/receipts")
