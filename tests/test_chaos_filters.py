import random
import re
import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))
sys.path.append(str(Path(__file__).resolve().parent))

from doubles import ScriptedRandom

from naas.chaos import ChaosRequest, validate_config
from naas.chaos.eligibility import should_apply_chaos
from naas.chaos.routes import matches_any, matches_route


class RouteMatcherTests(unittest.TestCase):
    def test_literal_pattern_matches_exact_path_and_prefix(self):
        self.assertTrue(matches_route("/chaos", "/chaos"))
        self.assertTrue(matches_route("/chaos/sub", "/chaos"))
        self.assertFalse(matches_route("/chao", "/chaos"))
        self.assertFalse(matches_route("/api/chaos", "/chaos"))

    def test_literal_prefix_is_not_segment_aware(self):
        self.assertTrue(matches_route("/chaosmonkey", "/chaos"))

    def test_regex_pattern_matches_when_search_succeeds(self):
        versioned = re.compile(r"^/api/v\d+/")
        self.assertTrue(matches_route("/api/v2/users", versioned))
        self.assertFalse(matches_route("/api/latest/users", versioned))
        self.assertTrue(matches_route("/reports/export.csv", re.compile(r"\.csv$")))

    def test_unsupported_pattern_shapes_never_match(self):
        for pattern in (None, 42, ["/chaos"], {"path": "/chaos"}):
            with self.subTest(pattern=pattern):
                self.assertFalse(matches_route("/chaos", pattern))

    def test_matches_any(self):
        patterns = ["/health", re.compile(r"^/admin")]
        self.assertTrue(matches_any("/admin/users", patterns))
        self.assertTrue(matches_any("/health", patterns))
        self.assertFalse(matches_any("/orders", patterns))
        self.assertFalse(matches_any("/orders", []))


class EligibilityTests(unittest.TestCase):
    def check(self, options, method="GET", path="/test", environment="development", rng=None):
        config = validate_config(options)
        return should_apply_chaos(ChaosRequest(method, path), config, environment, rng or ScriptedRandom())

    def test_zero_rate_is_never_eligible(self):
        combos = [
            ("GET", "/test", "development"),
            ("POST", "/chaos", "production"),
            ("OPTIONS", "/", "staging"),
        ]
        for method, path, environment in combos:
            with self.subTest(method=method, path=path, environment=environment):
                self.assertFalse(self.check({"errorRate": 0, "targetRoutes": ["/"]}, method, path, environment))

    def test_full_rate_is_always_eligible_without_drawing(self):
        rng = ScriptedRandom()
        for path in ("/a", "/b/c", "/"):
            self.assertTrue(self.check({"errorRate": 100}, path=path, rng=rng))
        self.assertEqual(rng.draws, 0)

    def test_full_rate_still_respects_filters(self):
        self.assertFalse(self.check({"errorRate": 100, "targetMethods": ["POST"]}, method="GET"))
        self.assertFalse(self.check({"errorRate": 100, "targetRoutes": ["/chaos"]}, path="/safe"))
        self.assertFalse(self.check({"errorRate": 100, "environments": ["production"]}))

    def test_inactive_environment_is_not_eligible(self):
        self.assertFalse(self.check({"errorRate": 100, "environments": ["production"]}, environment="development"))
        self.assertTrue(self.check({"errorRate": 100, "environments": ["production"]}, environment="production"))

    def test_method_must_be_targeted(self):
        options = {"errorRate": 100, "targetMethods": ["POST"]}
        self.assertFalse(self.check(options, method="GET"))
        self.assertTrue(self.check(options, method="POST"))
        self.assertTrue(self.check(options, method="post"))

    def test_exclude_routes_win_over_target_routes(self):
        options = {"errorRate": 100, "targetRoutes": ["/api"], "excludeRoutes": ["/api/health"]}
        self.assertFalse(self.check(options, path="/api/health"))
        self.assertTrue(self.check(options, path="/api/orders"))

    def test_target_routes_limit_scope(self):
        options = {"errorRate": 100, "targetRoutes": ["/chaos", re.compile(r"^/v\d+/")]}
        self.assertTrue(self.check(options, path="/chaos"))
        self.assertTrue(self.check(options, path="/v1/items"))
        self.assertFalse(self.check(options, path="/safe"))

    def test_empty_target_routes_means_every_route(self):
        self.assertTrue(self.check({"errorRate": 100, "targetRoutes": []}, path="/anything"))

    def test_intermediate_rate_compares_roll_against_rate(self):
        self.assertTrue(self.check({"errorRate": 50}, rng=ScriptedRandom(0.49)))
        self.assertFalse(self.check({"errorRate": 50}, rng=ScriptedRandom(0.5)))
        self.assertFalse(self.check({"errorRate": 1}, rng=ScriptedRandom(0.01)))
        self.assertTrue(self.check({"errorRate": 99}, rng=ScriptedRandom(0.985)))

    def test_filters_short_circuit_before_the_roll(self):
        rng = ScriptedRandom()
        self.assertFalse(self.check({"errorRate": 50, "excludeRoutes": ["/test"]}, rng=rng))
        self.assertEqual(rng.draws, 0)

    def test_observed_rate_tracks_configured_rate(self):
        config = validate_config({"errorRate": 25})
        rng = random.Random(7)
        request = ChaosRequest("GET", "/test")
        hits = sum(should_apply_chaos(request, config, "development", rng) for _ in range(20_000))
        self.assertAlmostEqual(hits / 20_000, 0.25, delta=0.02)


if __name__ == "__main__":
    unittest.main()
