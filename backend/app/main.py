import logging
from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from solver import solve_linear_system

logger = logging.getLogger(__name__)

app = FastAPI(title="GaussSolver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SolveRequest(BaseModel):
    equations: Optional[str] = None
    matrix: Optional[list[list[float]]] = None


class StepInfo(BaseModel):
    step_number: int
    description: str
    expression: str
    explanation: str
    operation: Optional[str] = None
    matrix: Optional[list[list[float]]] = None


class SolveResponse(BaseModel):
    equation: str
    steps: list[StepInfo]
    final_answer: str
    solution: Optional[list[Union[float, str]]]
    error_message: Optional[str]
    verification_steps: list[StepInfo]


@app.post("/api/solve", response_model=SolveResponse)
def solve(req: SolveRequest):
    if (req.equations is None) == (req.matrix is None):
        raise HTTPException(
            status_code=400,
            detail="Provide exactly one of 'equations' or 'matrix'.",
        )

    source = req.matrix
    if req.equations is not None:
        source = req.equations.strip()
        if not source:
            raise HTTPException(status_code=400, detail="Equations cannot be empty.")

    try:
        result = solve_linear_system(source)
    except ValueError as e:
        logger.info("Rejected solve request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Solver failed")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

    return result
