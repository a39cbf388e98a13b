from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class TransactionType(str, Enum):
    EARNING = "EARNING"
    REDEEM = "REDEEM"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"
    FAILED = "FAILED"


REDEEM_RESOLUTIONS = (TransactionStatus.APPROVED, TransactionStatus.DECLINED)


class Transaction(BaseModel):
    id: str
    user_principal: str
    amount: int = Field(..., gt=0)
    address: str = ""
    transaction_type: TransactionType
    status: TransactionStatus
    description: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    def is_pending_redeem(self) -> bool:
        return (
            self.transaction_type == TransactionType.REDEEM
            and self.status == TransactionStatus.PENDING
        )


class User(BaseModel):
    id: str
    total_points: int = Field(default=0, ge=0)
    available_points: int = Field(default=0, ge=0)
    total_redeemed: int = Field(default=0, ge=0)
    transactions: list[Transaction] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    def find_transaction(self, transaction_id: str) -> Optional[int]:
        for index, transaction in enumerate(self.transactions):
            if transaction.id == transaction_id:
                return index
        return None


class Service(BaseModel):
    id: str
    created_at: datetime


class AnalyticsData(BaseModel):
    total_points: int = 0
    available_points: int = 0
    redeemed_points: int = 0
    total_transactions: int = 0


class InitializeCanisterRequest(BaseModel):
    service_id: str = Field(..., min_length=1, description="Identity of the backend allowed to drive the ledger")


class InitializeUserRequest(BaseModel):
    user_id: str


class AddPointsRequest(BaseModel):
    amount: int = Field(..., strict=True)
    description: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {"amount": 100, "description": "bonus"}
    })


class RedeemRequest(BaseModel):
    amount: int = Field(..., strict=True)
    address: str = Field(..., description="External payout destination")
    description: Optional[str] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {"amount": 40, "address": "addr1", "description": "cashout"}
    })


class UpdateRedeemStatusRequest(BaseModel):
    status: str = Field(..., description="APPROVED or DECLINED")
