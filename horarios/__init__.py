"""
Generador de horarios escolares con algoritmo genético.

Módulos:
- model: materias, franjas, docentes, aulas, grupos, lecciones y horarios
- data_loader: catálogo de referencia (por defecto o desde CSV)
- initial_population: población inicial aleatoria
- rules / evaluation: reglas de conflicto y función de aptitud
- selection / operators / ga: torneo, cruce, mutación, reparación y bucle principal
- report / export: progreso, resúmenes y archivos de salida
"""

__version__ = "0.1.0"
