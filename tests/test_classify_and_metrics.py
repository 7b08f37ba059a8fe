import unittest

from power_estimator.core.classify import categorize_line, classify, configure_from_config
from power_estimator.core.metrics import (
    apply_profile,
    average_power,
    compute_metrics,
    count_by_category,
    instructions_frame,
    total_energy,
    total_power,
    total_time,
)
from power_estimator.core.model import InstructionCategory as IC, ParsedInstruction
from power_estimator.core.profiles import (
    CPUProfile,
    available_profiles,
    create_basic_profile,
    create_high_performance_profile,
    create_low_power_profile,
    get_profile,
)

SAMPLE = """// Paste your code here, example:
int x = 5 + 3;
if (x > 0) {
    int[] arr = new int[10];
    for (int i = 0; i < 10; i++) {
        arr[i] = i * 2;
    }
}"""


class ClassificationTests(unittest.TestCase):
    def tearDown(self):
        configure_from_config({})

    def test_sample_lines(self):
        self.assertEqual(IC.ARITHMETIC, categorize_line("int x = 5 + 3;"))
        self.assertEqual(IC.BRANCH, categorize_line("if (x > 0) {"))
        self.assertEqual(IC.MEMORY, categorize_line("int[] arr = new int[10];"))
        self.assertEqual(IC.ARITHMETIC, categorize_line("arr[i] = i * 2;"))

    def test_increment_wins_over_loop_keyword(self):
        self.assertEqual(IC.ARITHMETIC, categorize_line("for (int i = 0; i < 10; i++) {"))
        self.assertEqual(IC.CONTROL, categorize_line("for (item : items) {"))

    def test_arithmetic_precedes_logical(self):
        self.assertEqual(IC.ARITHMETIC, categorize_line("ok = a && b + 1;"))
        self.assertEqual(IC.ARITHMETIC, categorize_line("x += a & b;"))
        # '|=' is not a compound arithmetic assignment
        self.assertEqual(IC.LOGICAL, categorize_line("mask |= 1;"))
        self.assertEqual(IC.ARITHMETIC, categorize_line("count--;"))
        self.assertEqual(IC.ARITHMETIC, categorize_line("y = Math.sqrt(x);"))

    def test_operator_must_follow_assignment(self):
        self.assertEqual(IC.ARITHMETIC, categorize_line("total = a - b;"))
        self.assertEqual(IC.UNKNOWN, categorize_line("total - 1;"))

    def test_logical_rules(self):
        self.assertEqual(IC.LOGICAL, categorize_line("ready && done;"))
        self.assertEqual(IC.LOGICAL, categorize_line("flags ^ bit;"))
        # any '!' counts, inequality comparisons included
        self.assertEqual(IC.LOGICAL, categorize_line("if (x != y) {"))
        self.assertEqual(IC.LOGICAL, categorize_line('print("hi!");'))

    def test_keyword_prefixes_are_case_insensitive(self):
        self.assertEqual(IC.BRANCH, categorize_line("ELSE {"))
        self.assertEqual(IC.BRANCH, categorize_line("default:"))
        self.assertEqual(IC.CONTROL, categorize_line("Return x;"))
        self.assertEqual(IC.CONTROL, categorize_line("while (running) {"))
        # plain prefix match, no word boundary
        self.assertEqual(IC.CONTROL, categorize_line("double d;"))

    def test_memory_and_unknown(self):
        self.assertEqual(IC.MEMORY, categorize_line("ptr = malloc(10);"))
        self.assertEqual(IC.MEMORY, categorize_line("free(ptr);"))
        self.assertEqual(IC.MEMORY, categorize_line("Node n = new Node();"))
        self.assertEqual(IC.UNKNOWN, categorize_line("foo();"))
        self.assertEqual(IC.UNKNOWN, categorize_line("}"))

    def test_blank_and_comment_lines_are_dropped(self):
        for line in ["", "   ", "// comment", "/* block */", "* continuation", "   * indented"]:
            self.assertEqual([], classify(line), line)
        self.assertEqual([], classify(""))
        self.assertEqual([], classify(None))

    def test_classify_keeps_order_and_trims(self):
        out = classify(SAMPLE)
        self.assertEqual(8, len(out))
        self.assertEqual("int x = 5 + 3;", out[0].raw_text)
        self.assertEqual("int[] arr = new int[10];", out[2].raw_text)
        self.assertEqual(
            [IC.ARITHMETIC, IC.BRANCH, IC.MEMORY, IC.ARITHMETIC, IC.ARITHMETIC,
             IC.UNKNOWN, IC.UNKNOWN, IC.UNKNOWN],
            [i.category for i in out],
        )
        self.assertTrue(all(i.power == 0.0 and i.execution_time == 0.0 for i in out))

    def test_classify_accepts_line_sequences(self):
        out = classify(["  x += 1;  ", "// skip", "return;"])
        self.assertEqual(["x += 1;", "return;"], [i.raw_text for i in out])

    def test_classification_is_deterministic(self):
        self.assertEqual(classify(SAMPLE), classify(SAMPLE))

    def test_comment_prefixes_from_config(self):
        configure_from_config({"classification": {"comment_prefixes": ["#"]}})
        out = classify("# note\n// kept now")
        self.assertEqual(["// kept now"], [i.raw_text for i in out])

        configure_from_config({})
        self.assertEqual(["# note"], [i.raw_text for i in classify("# note\n// dropped")])

    def test_category_is_read_only(self):
        instr = ParsedInstruction("x = 1 + 2;", IC.ARITHMETIC)
        with self.assertRaises(AttributeError):
            instr.category = IC.MEMORY
        instr.power = 1.0
        self.assertEqual(1.0, instr.power)


class ProfileTests(unittest.TestCase):
    def test_fresh_profile_defaults(self):
        p = CPUProfile("Bare")
        for c in IC:
            self.assertEqual(2.0, p.power_for(c))
        self.assertEqual(2.0, p.time_for(IC.ARITHMETIC))
        self.assertEqual(1.5, p.time_for(IC.LOGICAL))
        self.assertEqual(3.5, p.time_for(IC.MEMORY))
        self.assertEqual(1.0, p.time_for(IC.CONTROL))
        self.assertEqual(2.5, p.time_for(IC.BRANCH))
        self.assertEqual(1.8, p.time_for(IC.UNKNOWN))

    def test_preset_coefficients(self):
        expected = {
            "Basic": (create_basic_profile, [3.5, 2.5, 5.0, 1.8, 2.8, 2.0]),
            "High Performance": (create_high_performance_profile, [5.0, 4.0, 6.5, 2.5, 4.2, 3.5]),
            "Low Power": (create_low_power_profile, [2.2, 1.6, 3.8, 1.0, 1.8, 1.5]),
        }
        order = [IC.ARITHMETIC, IC.LOGICAL, IC.MEMORY, IC.CONTROL, IC.BRANCH, IC.UNKNOWN]
        for name, (factory, powers) in expected.items():
            p = factory()
            self.assertEqual(name, p.name)
            self.assertEqual(powers, [p.power_for(c) for c in order])
            self.assertEqual([2.0, 1.5, 3.5, 1.0, 2.5, 1.8], [p.time_for(c) for c in order])

    def test_presets_are_frozen(self):
        p = create_basic_profile()
        self.assertTrue(p.frozen)
        with self.assertRaises(TypeError):
            p.set_power(IC.ARITHMETIC, 9.9)
        self.assertEqual(3.5, p.power_for(IC.ARITHMETIC))

    def test_lookup_by_name_and_custom_profiles(self):
        self.assertEqual("High Performance", get_profile("high performance").name)
        with self.assertRaises(KeyError):
            get_profile("Quantum")

        cfg = {"profiles": {"Edge": {"power": {"arithmetic": 1.2}, "time": {"MEMORY": 4.0}}}}
        self.assertEqual(["Basic", "High Performance", "Low Power", "Edge"], list(available_profiles(cfg)))
        edge = get_profile("edge", cfg)
        self.assertEqual(1.2, edge.power_for(IC.ARITHMETIC))
        self.assertEqual(2.0, edge.power_for(IC.MEMORY))
        self.assertEqual(4.0, edge.time_for(IC.MEMORY))
        self.assertTrue(edge.frozen)

    def test_unknown_category_in_config(self):
        with self.assertRaises(ValueError):
            available_profiles({"profiles": {"Bad": {"power": {"FLOAT": 1.0}}}})


class MetricsTests(unittest.TestCase):
    def test_empty_sequence(self):
        m = compute_metrics([])
        self.assertEqual(0, m.instruction_count)
        self.assertEqual(0.0, m.total_power)
        self.assertEqual(0.0, m.average_power)
        self.assertEqual(0.0, m.total_time)
        self.assertEqual(0.0, m.total_energy)
        self.assertEqual({c: 0 for c in IC}, m.count_by_category)
        self.assertTrue(instructions_frame([]).empty)

    def test_basic_profile_on_sample(self):
        instrs = classify(SAMPLE)
        apply_profile(instrs, create_basic_profile())
        self.assertAlmostEqual(24.3, total_power(instrs))
        self.assertAlmostEqual(24.3 / 8, average_power(instrs))
        self.assertAlmostEqual(17.4, total_time(instrs))
        self.assertAlmostEqual(56.3, total_energy(instrs))

        counts = count_by_category(instrs)
        self.assertEqual(3, counts[IC.ARITHMETIC])
        self.assertEqual(1, counts[IC.MEMORY])
        self.assertEqual(0, counts[IC.LOGICAL])
        self.assertEqual(set(IC), set(counts))

    def test_energy_is_sum_of_products(self):
        instrs = classify(["x += 1;", "if (a) {", "return;"])
        apply_profile(instrs, create_low_power_profile())
        expected = sum(i.power * i.execution_time for i in instrs)
        self.assertEqual(expected, total_energy(instrs))
        self.assertNotAlmostEqual(total_power(instrs) * total_time(instrs), total_energy(instrs))

    def test_apply_profile_is_idempotent_and_overwrites(self):
        instrs = classify(SAMPLE)
        basic = create_basic_profile()
        apply_profile(instrs, basic)
        first = compute_metrics(instrs)
        apply_profile(instrs, basic)
        self.assertEqual(first, compute_metrics(instrs))

        apply_profile(instrs, create_high_performance_profile())
        apply_profile(instrs, basic)
        self.assertEqual(first, compute_metrics(instrs))

    def test_instructions_frame(self):
        instrs = classify(["x = y * 2;", "free(p);"])
        apply_profile(instrs, create_basic_profile())
        df = instructions_frame(instrs)
        self.assertEqual([1, 2], df["index"].tolist())
        self.assertEqual(["ARITHMETIC", "MEMORY"], df["category"].tolist())
        self.assertAlmostEqual(7.0, df["energy_pJ"].iloc[0])
        self.assertAlmostEqual(17.5, df["energy_pJ"].iloc[1])


if __name__ == "__main__":
    unittest.main()
