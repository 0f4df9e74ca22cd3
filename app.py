# app.py
import random

import pandas as pd
import streamlit as st

from horarios.config import load_config
from horarios.data_loader import default_catalog, load_catalog
from horarios.evaluation import FitnessEvaluator
from horarios.ga import GeneticSolver
from horarios.report import abbreviate, schedule_grid, timetable_to_dataframe
from horarios.rules import ConflictType
from horarios.selection import best_of

# --- CONFIGURACIÓN DE PÁGINA ---
st.set_page_config(page_title="Horario Escolar - AG", layout="wide", initial_sidebar_state="expanded")

st.markdown("""
    <style>
    .stButton>button {
        width: 100%;
        background-color: #ff4b4b;
        color: white;
        font-weight: bold;
        height: 45px;
    }
    .read-only-input {
        background-color: #333;
        color: #fff;
        padding: 5px;
        border: 1px solid #555;
        border-radius: 4px;
        text-align: center;
        font-weight: bold;
    }
    </style>
""", unsafe_allow_html=True)


# --- FUNCIONES HELPERS ---
def reset_state():
    for key in ("solver", "population", "best_ind", "history", "generation_count"):
        st.session_state.pop(key, None)


# --- MAIN APP ---
def main():
    cfg = load_config("config.yaml")

    with st.sidebar:
        st.title("🧬 Menú Principal")
        st.markdown("---")
        page = st.radio("Ir a la sección:", [
            "Ejecutar AG",
            "Horario por Grupo",
            "Horario por Docente",
            "Conflictos",
            "Horario en General",
        ])
        st.markdown("---")
        cfg.population_size = st.number_input("Población", 10, 500, cfg.population_size, step=10)
        cfg.mutation_rate = st.slider("Tasa de mutación", 0.0, 0.5, float(cfg.mutation_rate), 0.01)
        cfg.tournament_size = st.number_input("Tamaño de torneo", 1, 20, cfg.tournament_size)
        cfg.repair_enabled = st.checkbox("Reparación", value=cfg.repair_enabled)
        seed = st.number_input("Semilla", 0, 10_000, cfg.seed if cfg.seed is not None else 42)
        use_csv = st.checkbox("Cargar catálogo desde data/", value=False)
        cfg.validate()

    if "catalog" not in st.session_state or st.session_state.get("use_csv") != use_csv:
        st.session_state.catalog = load_catalog("data", cfg) if use_csv else default_catalog(cfg)
        st.session_state.use_csv = use_csv
        reset_state()
    catalog = st.session_state.catalog

    # 1. EJECUTAR AG
    if page == "Ejecutar AG":
        st.header("⚙️ Ejecución del Algoritmo Genético")
        c1, c2, c3 = st.columns(3)

        if c1.button("🚀 Población Inicial (Reset)"):
            solver = GeneticSolver(catalog, cfg, rng=random.Random(int(seed)))
            population = solver.initialize()
            best = best_of(population)
            st.session_state.solver = solver
            st.session_state.population = population
            st.session_state.best_ind = best
            st.session_state.generation_count = 0
            st.session_state.history = [(0, best.fitness)]

        steps = c2.number_input("Generaciones por paso", 1, 1000, 50)
        if c3.button("Generar") and "solver" in st.session_state:
            solver = st.session_state.solver
            population = st.session_state.population
            with st.spinner("Evolucionando..."):
                for _ in range(int(steps)):
                    population = solver.create_new_generation(population)
                    solver.evaluator.evaluate_population(population)
                    st.session_state.generation_count += 1
                    best = best_of(population)
                    st.session_state.history.append((st.session_state.generation_count, best.fitness))
                    if solver.evaluator.is_solution(best):
                        break
            st.session_state.population = population
            st.session_state.best_ind = best

        if "best_ind" not in st.session_state:
            st.warning("Inicialice la población primero.")
            return

        best = st.session_state.best_ind
        gen_num = st.session_state.generation_count
        st.markdown(f"""
        <div style='display:flex; gap:10px; margin-top:5px;'>
            <div><small>Generación</small><div class='read-only-input'>{gen_num:04d}</div></div>
            <div><small>Mejor Fitness</small><div class='read-only-input' style='color:#ff4b4b'>{best.fitness:.0f}</div></div>
            <div><small>Lecciones</small><div class='read-only-input'>{len(best.lessons)}</div></div>
        </div>
        """, unsafe_allow_html=True)
        if st.session_state.solver.evaluator.is_solution(best):
            st.success("¡Horario sin conflictos encontrado!")

        hist = pd.DataFrame(st.session_state.history, columns=["gen", "best_fitness"]).set_index("gen")
        st.line_chart(hist)
        return

    if "best_ind" not in st.session_state:
        st.warning("Ejecute el AG primero.")
        return

    best = st.session_state.best_ind
    evaluator = FitnessEvaluator.from_config(catalog, cfg)
    eval_res = evaluator.evaluate(best)

    # 2. HORARIO POR GRUPO
    if page == "Horario por Grupo":
        st.header("📅 Horario por Grupo")
        group = st.selectbox("Seleccione Grupo:", catalog.groups, format_func=lambda g: g.name)
        grid = schedule_grid(
            best.indexed_lessons_for(group), cfg,
            lambda l: f"{abbreviate(l.subject.display_name)} ({l.classroom.name})",
            eval_res.conflicted,
        )
        st.dataframe(grid, use_container_width=True)

    # 3. HORARIO POR DOCENTE
    elif page == "Horario por Docente":
        st.header("👩‍🏫 Horario por Docente")
        teacher = st.selectbox("Seleccione Docente:", catalog.teachers, format_func=lambda t: t.name)
        grid = schedule_grid(
            best.indexed_lessons_for(teacher), cfg,
            lambda l: f"Gr{l.group.id} ({l.classroom.name})",
            eval_res.conflicted,
        )
        st.dataframe(grid, use_container_width=True)

    # 4. CONFLICTOS
    elif page == "Conflictos":
        st.header("⚠️ Desglose de Conflictos")
        df = pd.DataFrame([
            {
                "Regla": ct.display_name,
                "Conflictos": eval_res.conflicts.get(ct, 0),
                "Peso": cfg.rule_weights.get(ct.key),
                "Penalización": eval_res.penalties.get(ct, 0.0),
            }
            for ct in ConflictType
        ])
        st.dataframe(df, use_container_width=True)
        st.metric("Fitness", f"{eval_res.fitness:.0f}", delta=f"-{eval_res.penalty:.0f}")

    # 5. HORARIO EN GENERAL
    elif page == "Horario en General":
        st.header("✅ Tabla de Resultados Finales")
        df_res = timetable_to_dataframe(best, cfg)
        st.dataframe(df_res, use_container_width=True)
        csv = df_res.to_csv(index=False).encode("utf-8")
        st.download_button("📥 Descargar CSV", data=csv, file_name="horario_final.csv", mime="text/csv")


if __name__ == "__main__":
    main()
