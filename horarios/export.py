# horarios/export.py
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .config import GAConfig
from .evaluation import EvaluationResult
from .ga import RunResult
from .report import timetable_to_dataframe

logger = logging.getLogger(__name__)


def conflicts_dataframe(eval_res: EvaluationResult) -> pd.DataFrame:
    rows = [
        {"tipo": ct.key, "conflictos": n, "penalizacion": eval_res.penalties[ct]}
        for ct, n in eval_res.conflicts.items()
    ]
    rows.append({"tipo": "fitness", "conflictos": eval_res.total_conflicts, "penalizacion": eval_res.fitness})
    return pd.DataFrame(rows)


def export_outputs(
    result: RunResult,
    eval_res: EvaluationResult,
    out_dir: Path,
    cfg: GAConfig,
    elapsed: Optional[float] = None,
) -> Dict[str, Path]:
    """Guarda el mejor horario y sus métricas como CSV en `out_dir`."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "schedule": out_dir / "schedule.csv",
        "conflicts": out_dir / "conflicts.csv",
        "history": out_dir / "history.csv",
        "metrics": out_dir / "metrics.csv",
    }
    timetable_to_dataframe(result.best, cfg).to_csv(paths["schedule"], index=False)
    conflicts_dataframe(eval_res).to_csv(paths["conflicts"], index=False)
    pd.DataFrame(result.history, columns=["gen", "best_fitness", "avg_fitness"]).to_csv(
        paths["history"], index=False
    )
    metrics = {
        "best_fitness": result.best.fitness,
        "found_at_generation": result.best.generation,
        "generations_ran": result.generations,
        "converged": result.converged,
        "attempt": result.attempt,
        "total_lessons": len(result.best.lessons),
        "time_sec": elapsed,
    }
    pd.DataFrame([metrics]).to_csv(paths["metrics"], index=False)
    logger.info("Resultados guardados en %s", out_dir)
    return paths


def write_conflict_snapshots(snapshots: List[Dict], path: Path) -> Path:
    """Serializa los conflictos del mejor horario registrados cada N generaciones."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(snapshots, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("actualizado: %s", path)
    return path
