import argparse
import logging
import time
from pathlib import Path

from horarios.config import GAConfig, load_config
from horarios.data_loader import SchoolCatalog, default_catalog, load_catalog, write_catalog
from horarios.evaluation import FitnessEvaluator
from horarios.export import export_outputs, write_conflict_snapshots
from horarios.ga import GeneticSolver
from horarios.report import ConsoleReporter, print_final_results, print_timetable_summary


def build_catalog(cfg: GAConfig, data_dir) -> SchoolCatalog:
    if data_dir and Path(data_dir).exists():
        return load_catalog(data_dir, cfg)
    if data_dir:
        print(f"No existe {data_dir}, se usa el catálogo por defecto")
    return default_catalog(cfg)


def apply_overrides(cfg: GAConfig, args) -> GAConfig:
    if args.seed is not None:
        cfg.seed = args.seed
    if args.generations is not None:
        cfg.max_generations = args.generations
    if args.population is not None:
        cfg.population_size = args.population
    if args.attempts is not None:
        cfg.max_attempts = args.attempts
    return cfg.validate()


def main():
    parser = argparse.ArgumentParser(description="Generación de horarios escolares con AG")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--data_dir", default=None, help="Directorio con teachers/classrooms/groups CSV")
    parser.add_argument("--out_dir", default=None, help="Directorio de salida (por defecto output_dir)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--generations", type=int, default=None)
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("--attempts", type=int, default=None)
    parser.add_argument("--seed-data", dest="seed_data", default=None,
                        help="Escribe el catálogo por defecto en este directorio y termina")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    cfg = apply_overrides(load_config(args.config), args)

    if args.seed_data:
        written = write_catalog(default_catalog(cfg), args.seed_data)
        print(f"Catálogo escrito: {len(written)} archivos en {args.seed_data}")
        return

    print("Cargando catálogo...")
    catalog = build_catalog(cfg, args.data_dir)
    evaluator = FitnessEvaluator.from_config(catalog, cfg)
    solver = GeneticSolver(catalog, cfg, evaluator=evaluator, reporter=ConsoleReporter())

    print(f"Generaciones: {cfg.max_generations} | Población: {cfg.population_size} | Intentos: {cfg.max_attempts}")
    start = time.perf_counter()
    result = solver.solve()
    elapsed = time.perf_counter() - start

    best = result.best
    eval_res = evaluator.evaluate(best)

    print_final_results(best, eval_res)
    print(f"Number of generations: {result.generations} (intento {result.attempt}, mejor en gen {best.generation})")
    print(f"Tiempo: {elapsed:.2f}s")
    print_timetable_summary(best, catalog, cfg)

    out_dir = Path(args.out_dir or cfg.output_dir)
    export_outputs(result, eval_res, out_dir, cfg, elapsed)
    write_conflict_snapshots(result.snapshots, out_dir / "conflicts.json")
    print(f"Se guardaron resultados en {out_dir}/")


if __name__ == "__main__":
    main()
