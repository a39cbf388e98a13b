from typing import Optional
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from .config import ApplicationConfig, configure_logging
from .errors import ErrorKind
from .models import (
    AddPointsRequest, AnalyticsData, InitializeCanisterRequest, InitializeUserRequest,
    RedeemRequest, Service, Transaction, UpdateRedeemStatusRequest, User,
)
from .result import Result
from .service import PointsLedgerService

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_PAYLOAD: status.HTTP_400_BAD_REQUEST,
}


def unwrap(result: Result):
    if result.is_err():
        raise HTTPException(
            status_code=STATUS_BY_KIND[result.error.kind],
            detail=result.error.model_dump(mode="json"),
        )
    return result.value


def create_app(config=ApplicationConfig, service: Optional[PointsLedgerService] = None) -> FastAPI:
    ledger_service = service or PointsLedgerService(controller_ids=config.CONTROLLER_IDS)

    app = FastAPI(
        title="Points Ledger API",
        description="Points accrual and redemption ledger driven by a single authorized service",
        version="1.0.0",
        root_path=config.API_ROOT_PATH,
    )
    app.state.ledger_service = ledger_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_caller(request: Request) -> str:
        return request.headers.get(config.CALLER_HEADER, "")

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "points-ledger"}

    @app.post("/canister/init", response_model=Service, tags=["System"])
    def initialize_canister(request: InitializeCanisterRequest, caller: str = Depends(get_caller)) -> Service:
        return unwrap(ledger_service.initialize_canister(caller, request.service_id))

    @app.post("/users", response_model=User, status_code=status.HTTP_201_CREATED, tags=["Users"])
    def initialize_user(request: InitializeUserRequest, caller: str = Depends(get_caller)) -> User:
        return unwrap(ledger_service.initialize_user(caller, request.user_id))

    @app.get("/users/{user_id}", response_model=User, tags=["Users"])
    def get_user(user_id: str, caller: str = Depends(get_caller)) -> User:
        return unwrap(ledger_service.get_user(caller, user_id))

    @app.get("/users/{user_id}/transactions", response_model=list[Transaction], tags=["Users"])
    def get_user_transactions(user_id: str, caller: str = Depends(get_caller)) -> list[Transaction]:
        return unwrap(ledger_service.get_user_transactions(caller, user_id))

    @app.post("/users/{user_id}/points", response_model=User, tags=["Points"])
    def add_points(user_id: str, request: AddPointsRequest, caller: str = Depends(get_caller)) -> User:
        return unwrap(ledger_service.add_points(caller, user_id, request.amount, request.description))

    @app.post(
        "/users/{user_id}/redeem",
        response_model=Transaction,
        status_code=status.HTTP_201_CREATED,
        tags=["Redemptions"],
    )
    def request_redeem(user_id: str, request: RedeemRequest, caller: str = Depends(get_caller)) -> Transaction:
        return unwrap(ledger_service.request_redeem(
            caller, user_id, request.amount, request.address, request.description
        ))

    @app.post(
        "/users/{user_id}/redeem/{transaction_id}/status",
        response_model=Transaction,
        tags=["Redemptions"],
    )
    def update_redeem_status(
        user_id: str,
        transaction_id: str,
        request: UpdateRedeemStatusRequest,
        caller: str = Depends(get_caller),
    ) -> Transaction:
        return unwrap(ledger_service.update_redeem_status(caller, user_id, transaction_id, request.status))

    @app.get("/transactions/{transaction_id}", response_model=Transaction, tags=["Redemptions"])
    def get_transaction(transaction_id: str, caller: str = Depends(get_caller)) -> Transaction:
        return unwrap(ledger_service.get_transaction(caller, transaction_id))

    @app.get("/redeem/pending", response_model=list[Transaction], tags=["Redemptions"])
    def get_pending_redeem_transactions(caller: str = Depends(get_caller)) -> list[Transaction]:
        return unwrap(ledger_service.get_pending_redeem_transactions(caller))

    @app.get("/analytics", response_model=AnalyticsData, tags=["System"])
    def get_platform_analytics(caller: str = Depends(get_caller)) -> AnalyticsData:
        return unwrap(ledger_service.get_platform_analytics(caller))

    return app


if __name__ == "__main__":
    import uvicorn
    configure_logging(ApplicationConfig.LOG_LEVEL)
    uvicorn.run(
        create_app(ApplicationConfig),
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
