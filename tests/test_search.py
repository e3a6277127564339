"""
Tests for the search loop.
"""

import multiprocessing
from collections import Counter

import pytest

from searchmodels import (
    ExecutorSettings,
    IncompatibilityError,
    InvalidSetupError,
    ModelSearch,
    SearchHooks,
    SearchParameters,
    StopReason,
    search_models,
)

from model_spaces import (
    IntegerSpace,
    PolyModelSpace,
    RosenbrockSpace,
    ScalarSpace,
    poly,
    reject_above_eight,
    rosenbrock,
    shifted_square,
)

needs_fork = pytest.mark.skipif(
    "fork" not in multiprocessing.get_all_start_methods(),
    reason="fork start method not available",
)


def constant_error(x):
    return 1.0


def always_fails(x):
    raise InvalidSetupError(x, "never valid: ")


class TestEndToEnd:

    def test_converges_near_minimum(self):
        params = SearchParameters(
            maxpopulation=20,
            bsize=5,
            mutbsize=5,
            crossbsize=0,
            tol=1e-6,
            maxiters=50,
            verbose=False,
        )
        search = ModelSearch(shifted_square, ScalarSpace(0.0, 10.0, seed=42), 20, params=params, seed=42)
        population = search.run()

        assert search.stop_reason == StopReason.CONVERGED
        assert search.iterations < 50
        assert abs(population.best.config - 7.0) < 0.25
        assert population.best_error < 0.05
        assert len(population) <= 20

    def test_functional_entry_point(self, scalar_space):
        population = search_models(
            shifted_square,
            scalar_space,
            16,
            maxpopulation=8,
            bsize=4,
            mutbsize=4,
            crossbsize=4,
            maxiters=5,
            tol=-1.0,
            verbose=False,
            seed=3,
        )

        assert 0 < len(population) <= 8
        errors = [e.error for e in population]
        assert errors == sorted(errors)


class TestInvariants:

    def test_population_bounded_and_sorted(self, scalar_space, quiet_params):
        seen_sorted = []

        def check_sorted(space, params, population):
            errors = [e.error for e in population]
            seen_sorted.append(errors == sorted(errors))

        search = ModelSearch(
            shifted_square,
            scalar_space,
            30,
            params=quiet_params,
            hooks=SearchHooks(inspect_population=check_sorted),
            seed=1,
        )
        population = search.run()

        assert all(seen_sorted)
        assert len(seen_sorted) == search.iterations
        assert all(s.population_size <= quiet_params.maxpopulation for s in search.history)
        assert [e.error for e in population] == sorted(e.error for e in population)

    def test_best_error_never_increases(self, scalar_space, quiet_params):
        search = ModelSearch(shifted_square, scalar_space, 30, params=quiet_params, seed=2)
        search.run()

        best = [s.best_error for s in search.history]
        assert all(b2 <= b1 for b1, b2 in zip(best, best[1:]))

    def test_round_statistics(self, scalar_space, quiet_params):
        search = ModelSearch(shifted_square, scalar_space, 30, params=quiet_params, seed=2)
        search.run()

        for stats in search.history:
            assert stats.best_error <= stats.mean_error <= stats.worst_error
            assert stats.std_error >= 0.0
            assert stats.evaluation_time >= 0.0


class TestDeduplication:

    def test_initial_queue_is_distinct_samples(self, quiet_params):
        quiet_params.maxiters = 1
        replay = IntegerSpace(range(5), seed=4)
        expected = {replay.sample() for _ in range(50)}

        search = ModelSearch(float, IntegerSpace(range(5), seed=4), 50, params=quiet_params, seed=0)
        population = search.run()

        assert search.history[0].evaluated == len(expected)
        assert set(population.configs()) == expected

    def test_same_seed_same_queue(self, quiet_params):
        quiet_params.maxiters = 1
        runs = []
        for _ in range(2):
            search = ModelSearch(float, IntegerSpace(range(5), seed=8), 20, params=quiet_params, seed=0)
            runs.append(search.run().pairs())

        assert runs[0] == runs[1]

    def test_never_evaluates_twice(self, quiet_params):
        calls = Counter()

        def counting(x):
            calls[x] += 1
            return float(x)

        quiet_params.maxiters = 20
        search = ModelSearch(counting, IntegerSpace(range(6), seed=5), 3, params=quiet_params, seed=5)
        search.run()

        assert calls
        assert max(calls.values()) == 1
        assert search.queue.observed == sum(calls.values())

    def test_seed_list(self, quiet_params):
        quiet_params.maxiters = 1
        population = search_models(shifted_square, ScalarSpace(seed=1), [1.0, 1.0, 2.0, 7.0], params=quiet_params)

        assert population.configs() == [7.0, 2.0, 1.0]


class TestTermination:

    def test_negative_tol_runs_all_iterations(self, scalar_space, quiet_params):
        quiet_params.maxiters = 7
        search = ModelSearch(constant_error, scalar_space, 10, params=quiet_params, seed=0)
        search.run()

        assert search.stop_reason == StopReason.MAX_ITERATIONS
        assert search.iterations == 7
        assert len(search.history) == 7

    def test_stable_worst_error_converges(self, scalar_space, quiet_params):
        quiet_params.tol = 0.0
        search = ModelSearch(constant_error, scalar_space, 10, params=quiet_params, seed=0)
        search.run()

        # the first round has nothing to compare with
        assert search.stop_reason == StopReason.CONVERGED
        assert search.iterations == 2

    def test_custom_convergence(self, scalar_space, quiet_params):
        calls = []

        def record(current, previous):
            calls.append((current, previous))
            return len(calls) == 3

        quiet_params.tol = 0.5
        hooks = SearchHooks(convergence=record)
        search = ModelSearch(shifted_square, scalar_space, 10, params=quiet_params, hooks=hooks, seed=0)
        search.run()

        assert search.stop_reason == StopReason.CONVERGED
        assert search.iterations == 4
        assert len(calls) == 3

    def test_negative_tol_ignores_convergence_hook(self, scalar_space, quiet_params):
        quiet_params.maxiters = 4
        hooks = SearchHooks(convergence=lambda current, previous: True)
        search = ModelSearch(shifted_square, scalar_space, 10, params=quiet_params, hooks=hooks, seed=0)
        search.run()

        assert search.iterations == 4

    def test_all_failures_give_empty_population(self, scalar_space, quiet_params):
        search = ModelSearch(always_fails, scalar_space, 5, params=quiet_params, seed=0)
        population = search.run()

        assert len(population) == 0
        assert search.stop_reason == StopReason.EMPTY_POPULATION
        assert search.iterations == 1
        assert search.history[0].failures == 5

    def test_invalid_parameters(self, scalar_space):
        params = SearchParameters(maxpopulation=0, verbose=False)
        with pytest.raises(ValueError, match="maxpopulation"):
            ModelSearch(shifted_square, scalar_space, 5, params=params).run()


class TestErrorContainment:

    def test_setup_error_drops_single_configuration(self, quiet_params):
        def reject_third(x):
            if x == 3.0:
                raise InvalidSetupError(x, "bad shape: ")
            return x

        quiet_params.maxiters = 1
        seeds = [1.0, 2.0, 3.0, 4.0, 5.0]
        search = ModelSearch(reject_third, ScalarSpace(seed=1), seeds, params=quiet_params)
        population = search.run()

        assert sorted(population.configs()) == [1.0, 2.0, 4.0, 5.0]
        assert search.queue.observed == 5
        assert all(search.queue.was_observed(c) for c in seeds)
        assert search.history[0].failures == 1

    def test_failures_not_retried(self, quiet_params):
        quiet_params.maxiters = 15
        search = ModelSearch(reject_above_eight, ScalarSpace(seed=6), 60, params=quiet_params, seed=6)
        population = search.run()

        assert all(c <= 8.0 for c in population.configs())
        assert sum(s.failures for s in search.history) >= 1

    def test_incompatible_configuration_is_fatal(self, quiet_params):
        quiet_params.mutbsize = 1
        quiet_params.crossbsize = 0
        search = ModelSearch(constant_error, [ScalarSpace(seed=1)], ["text"], params=quiet_params)

        with pytest.raises(IncompatibilityError):
            search.run()


class TestHooks:

    def test_accept_config_vetoes(self, scalar_space, quiet_params):
        hooks = SearchHooks(accept_config=lambda x: x <= 5.0)
        search = ModelSearch(shifted_square, scalar_space, 30, params=quiet_params, hooks=hooks, seed=0)
        population = search.run()

        assert population
        assert all(c <= 5.0 for c in population.configs())

    def test_inspect_can_change_params(self, scalar_space, quiet_params):
        received = []

        def shorten(space, params, population):
            received.append((space, params))
            params.maxiters = 3

        hooks = SearchHooks(inspect_population=shorten)
        search = ModelSearch(shifted_square, scalar_space, 10, params=quiet_params, hooks=hooks, seed=0)
        search.run()

        assert search.iterations == 3
        assert all(s is scalar_space and p is quiet_params for s, p in received)

    def test_inspect_can_shrink_population(self, scalar_space, quiet_params):
        def shrink(space, params, population):
            params.maxpopulation = 4

        search = ModelSearch(
            shifted_square,
            scalar_space,
            10,
            params=quiet_params,
            hooks=SearchHooks(inspect_population=shrink),
            seed=0,
        )
        population = search.run()

        assert len(population) == 4
        assert all(s.population_size <= 4 for s in search.history)

    def test_get_error_value(self, scalar_space, quiet_params):
        population = search_models(
            lambda x: {"error": shifted_square(x), "x": x},
            scalar_space,
            10,
            params=quiet_params,
            get_error_value=lambda r: r["error"],
            seed=0,
        )

        assert all(e.error == e.result["error"] for e in population)
        assert [e.error for e in population] == sorted(e.error for e in population)


class TestSpaces:

    def test_polynomial_fit(self, poly_space):
        coeff = (1.0, -0.5, 0.25, 0.1, -0.05)
        xs = [i / 10.0 for i in range(-20, 21)]
        ys = [poly(coeff, x) for x in xs]

        def mse(c):
            return sum((poly(c, x) - y) ** 2 for x, y in zip(xs, ys)) / len(xs)

        params = SearchParameters(
            maxpopulation=32, bsize=16, mutbsize=16, crossbsize=16, maxiters=15, tol=-1.0, verbose=False
        )
        search = ModelSearch(mse, poly_space, 100, params=params, seed=4)
        population = search.run()

        assert population.best_error < search.history[0].best_error
        assert all(3 <= len(c) <= 6 for c in population.configs())

    def test_rosenbrock_with_range_narrowing(self, rosenbrock_space):
        def narrow(space, params, population):
            xs = [c[0] for c, _ in population]
            ys = [c[1] for c, _ in population]
            margin = space.st * 10
            space.xrange = (min(xs) - margin, max(xs) + margin)
            space.yrange = (min(ys) - margin, max(ys) + margin)

        original = rosenbrock_space.xrange
        params = SearchParameters(bsize=16, mutbsize=32, crossbsize=32, maxiters=20, tol=-1.0, verbose=False)
        search = ModelSearch(
            rosenbrock,
            rosenbrock_space,
            200,
            params=params,
            hooks=SearchHooks(inspect_population=narrow),
            seed=9,
        )
        population = search.run()

        assert rosenbrock_space.xrange != original
        assert population.best_error < search.history[0].best_error

    def test_heterogeneous_space_list(self, quiet_params):
        spaces = [ScalarSpace(0.0, 10.0, seed=1), IntegerSpace(range(10), seed=2)]
        search = ModelSearch(lambda x: abs(x - 3), spaces, 20, params=quiet_params, seed=3)
        population = search.run()

        assert population.best_error < 1.0
        assert {type(c) for c in population.configs()} <= {float, int}


class TestParallelModes:

    @pytest.mark.parametrize(
        "settings",
        [
            pytest.param(ExecutorSettings(mode="threads", max_workers=3), id="threads"),
            pytest.param(
                ExecutorSettings(mode="distributed", max_workers=2, start_method="fork"),
                id="distributed",
                marks=needs_fork,
            ),
        ],
    )
    def test_same_result_as_sequential(self, settings):
        def run(executor):
            params = SearchParameters(
                maxpopulation=10, bsize=5, mutbsize=5, crossbsize=5, maxiters=8, tol=-1.0, verbose=False
            )
            search = ModelSearch(
                shifted_square, ScalarSpace(seed=5), 12, params=params, executor=executor, seed=9
            )
            return search.run().pairs()

        assert run(settings) == run("none")

    def test_parallel_mode_names(self, scalar_space, quiet_params):
        quiet_params.maxiters = 2
        population = search_models(
            shifted_square, scalar_space, 10, params=quiet_params, parallel="threads", seed=0
        )
        assert population

        with pytest.raises(ValueError):
            search_models(shifted_square, scalar_space, 10, params=quiet_params, parallel="gpu")


class TestVerbose:

    def test_round_summary_on_stderr(self, scalar_space, capsys):
        params = SearchParameters(maxpopulation=5, maxiters=2, tol=-1.0, verbose=True)
        search_models(always_fails_on_zero, scalar_space, 5, params=params, seed=0)

        err = capsys.readouterr().err
        assert "SearchModels iteration 1>" in err
        assert "reached maximum number of iterations 2" in err


def always_fails_on_zero(x):
    if x == 0.0:
        raise InvalidSetupError(x)
    return x
