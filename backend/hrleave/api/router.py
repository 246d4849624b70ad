from fastapi import APIRouter

from hrleave.api.accruals import accruals_router
from hrleave.api.balances import balances_router
from hrleave.api.employees import employees_router
from hrleave.api.holidays import holidays_router
from hrleave.api.leave_types import leave_types_router
from hrleave.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(leave_types_router)
api_router.include_router(balances_router)
api_router.include_router(requests_router)
api_router.include_router(accruals_router)
api_router.include_router(holidays_router)
api_router.include_router(employees_router)
