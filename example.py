import logging

from nelder_mead import NelderMead, TerminationConfig, Variant

def rosenbrock(x):
    return (1.0 - x[0])**2 + 100.0 * (x[1] - x[0]**2)**2

def print_iteration(info):
    best = info.simplex.best()
    print(f"{info.iteration:4d} {info.action.name:<13} f={best.output:.6g} ({info.elapsed_ms} ms)")

def solve(variant):
    solver = NelderMead(
        rosenbrock,
        initial_guess=(-1.2, 1.0),
        step_sizes=(0.5, 0.5),
        lower_bounds=(-2.0, -1.0),
        upper_bounds=(0.8, 2.0), # the unconstrained optimum (1, 1) is outside
        termination_config=TerminationConfig(diameter_tolerance=1e-9, max_iterations=2000),
        variant=variant,
    )
    solver.add_listener(print_iteration)
    return solver.minimize()

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

for variant in Variant:
    result = solve(variant)
    print(f"{variant.name}: x={list(result.inputs)}, f={result.output:.6g}, "
        f"{result.iterations_run} iterations, {result.termination_reason.name}")
