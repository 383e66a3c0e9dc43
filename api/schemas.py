"""API request and response schemas."""

from pydantic import BaseModel, Field, model_validator


class SessionsResponse(BaseModel):
    """Активные SSE-сессии."""

    active: int = Field(description="Количество открытых потоков")
    sessions: list[str] = Field(description="ID открытых сессий")


class TickerRequest(BaseModel):
    """Запрос на поток тиков."""

    topic: str = Field(min_length=1, max_length=100, description="Тема потока")
    count: int = Field(default=5, ge=1, le=1000, description="Количество тиков")
    interval: float = Field(default=0.0, ge=0, le=10, description="Пауза между тиками, сек")
    fail_after: int | None = Field(
        default=None, ge=0, description="Завершить поток ошибкой после N тиков"
    )
    retry: int | None = Field(
        default=None, ge=0, description="Интервал переподключения клиента, мс"
    )

    @model_validator(mode="after")
    def validate_fail_after_within_count(self) -> "TickerRequest":
        """Validate that the failure point is reachable."""
        if self.fail_after is not None and self.fail_after > self.count:
            msg = "fail_after не может быть больше количества тиков"
            raise ValueError(msg)
        return self
