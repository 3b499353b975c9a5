from fastapi import FastAPI

from db import init_db
from routes import balance, items

app = FastAPI(title="Budget Planner")


@app.on_event("startup")
def startup():
    init_db()


app.include_router(balance.router)
app.include_router(items.router)


@app.get("/health")
def health():
    return {"status": "ok"}
