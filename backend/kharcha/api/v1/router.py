from fastapi import APIRouter

from kharcha.api.v1.endpoints import (
    auth,
    accounts,
    outflow_types,
    transactions,
    budgets,
    notifications,
    insights,
    users,
    health,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["Accounts"])
api_router.include_router(outflow_types.router, prefix="/outflow-types", tags=["Outflow Types"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
api_router.include_router(budgets.router, prefix="/budgets", tags=["Budgets"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(insights.router, prefix="/insights", tags=["Insights"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
