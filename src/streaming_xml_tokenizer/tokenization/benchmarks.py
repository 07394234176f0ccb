"""Performance benchmarking for XML scanning.

This module measures scanning throughput and memory use, optionally side by
side with the standard library's SAX parser and lxml, and compares two
benchmark runs to flag regressions.
"""

import gc
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import psutil

from streaming_xml_tokenizer.shared import ParserOptions, get_logger

from .scanner import XMLScanner

SCANNER_NAME = "streaming_xml_tokenizer"
EXTERNAL_PARSERS = ("xml.sax", "lxml")
REGRESSION_THRESHOLD = 0.05  # 5% change in processing time


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    parser_name: str
    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    characters_processed: int
    events_generated: int
    success: bool
    error_message: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def events_per_second(self) -> float:
        """Calculate events generated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_generated * 1000.0) / self.processing_time_ms

    @property
    def memory_per_character(self) -> float:
        """Calculate memory usage per character in bytes."""
        if self.characters_processed <= 0:
            return 0.0
        return (self.memory_used_mb * 1024 * 1024) / self.characters_processed


METRICS: Dict[str, Callable[[BenchmarkResult], float]] = {
    "processing_time_ms": lambda r: r.processing_time_ms,
    "memory_used_mb": lambda r: r.memory_used_mb,
    "characters_per_second": lambda r: r.characters_per_second,
    "events_per_second": lambda r: r.events_per_second,
    "memory_per_character": lambda r: r.memory_per_character,
}


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    suite_name: str = "Scanner Benchmark"
    results: List[BenchmarkResult] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        self.results.append(result)

    def result_for(self, parser_name: str, test_case: str) -> Optional[BenchmarkResult]:
        """Get the result of one parser on one test case, if recorded."""
        return next(
            (
                r for r in self.results
                if r.parser_name == parser_name and r.test_case == test_case
            ),
            None,
        )

    def get_statistics(self, parser_name: str, metric: str) -> Dict[str, float]:
        """Get min/max/mean/median/stdev of ``metric`` over successful runs."""
        extract = METRICS.get(metric)
        if extract is None:
            return {}
        values = [
            extract(r) for r in self.results
            if r.parser_name == parser_name and r.success
        ]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self, reference: str = SCANNER_NAME) -> Dict[str, Any]:
        """Summarize throughput and compare every parser with ``reference``.

        ``relative_speed`` maps each test case to the other parsers' time
        divided by the reference parser's time, so values above 1.0 mean
        the reference parser was faster.
        """
        parsers = sorted({r.parser_name for r in self.results})
        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "reference": reference,
            "throughput": {
                parser: self.get_statistics(parser, "characters_per_second")
                for parser in parsers
            },
            "failures": {
                f"{r.parser_name}_{r.test_case}": r.error_message
                for r in self.results if not r.success
            },
            "relative_speed": {},
        }

        for base in self.results:
            if base.parser_name != reference or not base.success:
                continue
            if base.processing_time_ms <= 0:
                continue
            ratios = {
                r.parser_name: r.processing_time_ms / base.processing_time_ms
                for r in self.results
                if r.test_case == base.test_case
                and r.parser_name != reference and r.success
            }
            if ratios:
                report["relative_speed"][base.test_case] = ratios

        return report


class _EventCounter:
    """Handler that only counts events."""

    def __init__(self) -> None:
        self.count = 0

    def _count(self, data: Any, start: int, end: int) -> None:
        self.count += 1

    text = start_tag = end_tag = comment = cdata = pi = decl = dtd = _count


class ScanBenchmark:
    """Scanner performance benchmark over a fixed set of documents."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10,
        options: Optional[ParserOptions] = None
    ) -> None:
        """Initialize benchmark.

        Args:
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of benchmark runs to average
            options: Scanner options (defaults to ``ParserOptions()``)
        """
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")

        self.correlation_id = correlation_id
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.options = options or ParserOptions(correlation_id=correlation_id)
        self.logger = get_logger(__name__, correlation_id, "benchmark")
        self.test_cases = self._create_test_cases()

    def _create_test_cases(self) -> Dict[str, str]:
        return {
            "small_well_formed": '''<?xml version="1.0" encoding="UTF-8"?>
<root>
    <element attr="value">Content</element>
    <empty/>
    <!-- Comment -->
</root>''',

            "mixed_constructs": '''<?xml version="1.0"?>
<!DOCTYPE catalog SYSTEM "catalog.dtd">
<catalog>
    <?render mode="fast"?>
    <book id="b1" rating='4'>
        <title>XML &amp; You</title>
        <summary><![CDATA[Use <tags> & entities freely]]></summary>
        <price currency="EUR">12.50</price>
        <note expr="a > b">&#65;&#x42;C</note>
    </book>
</catalog>''',

            "large_well_formed": self._generate_large_xml(),

            "unbalanced": '''<root><open><child>text</root>''',
        }

    def _generate_large_xml(self, item_count: int = 1000) -> str:
        parts = ['<?xml version="1.0" encoding="UTF-8"?>', "<large_document>"]
        for i in range(item_count):
            parts.append(f'''
    <item id="{i}" category="test" priority="{i % 10}">
        <title>Item {i}</title>
        <description>Description for item {i} with &lt;escaped&gt; text.</description>
        <tags><tag>benchmark</tag><tag>xml</tag></tags>
        <data value1="{i}" value2="{i * 2}"/>
    </item>''')
        parts.append("</large_document>")
        return "\n".join(parts)

    def _measure_memory_usage(self) -> float:
        """Get current resident memory in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _timed_run(
        self,
        parser_name: str,
        test_case: str,
        xml_content: str,
        run: Callable[[str], Tuple[int, bool, Optional[str]]]
    ) -> BenchmarkResult:
        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.time()

        events_generated, success, error_message = run(xml_content)

        processing_time = (time.time() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)
        return BenchmarkResult(
            parser_name=parser_name,
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            characters_processed=len(xml_content),
            events_generated=events_generated,
            success=success,
            error_message=error_message,
        )

    def _run_scanner(self, xml_content: str) -> Tuple[int, bool, Optional[str]]:
        counter = _EventCounter()
        result = XMLScanner(counter, self.options).scan(xml_content)
        error = result.errors[0].message if result.errors else None
        return counter.count, result.success, error

    def _run_sax(self, xml_content: str) -> Tuple[int, bool, Optional[str]]:
        import xml.sax

        class _SaxCounter(xml.sax.ContentHandler):
            def __init__(self) -> None:
                super().__init__()
                self.count = 0

            def startElement(self, name: str, attrs: Any) -> None:
                self.count += 1

            def endElement(self, name: str) -> None:
                self.count += 1

            def characters(self, content: str) -> None:
                self.count += 1

        counter = _SaxCounter()
        try:
            xml.sax.parseString(xml_content.encode("utf-8"), counter)
        except xml.sax.SAXParseException as e:
            return counter.count, False, str(e)
        return counter.count, True, None

    def _run_lxml(self, xml_content: str) -> Tuple[int, bool, Optional[str]]:
        from lxml import etree

        count = 0
        parser = etree.XMLPullParser(events=("start", "end", "comment", "pi"))
        try:
            parser.feed(xml_content.encode("utf-8"))
            for _ in parser.read_events():
                count += 1
            parser.close()
        except etree.XMLSyntaxError as e:
            return count, False, str(e)
        return count, True, None

    def benchmark_scanner(self, test_case: str, xml_content: str) -> BenchmarkResult:
        """Benchmark one run of the scanner."""
        return self._timed_run(SCANNER_NAME, test_case, xml_content, self._run_scanner)

    def benchmark_external_parser(
        self,
        parser_name: str,
        test_case: str,
        xml_content: str
    ) -> Optional[BenchmarkResult]:
        """Benchmark an external parser, or return None if it is unavailable."""
        if parser_name == "xml.sax":
            return self._timed_run(parser_name, test_case, xml_content, self._run_sax)
        if parser_name == "lxml":
            try:
                import lxml.etree  # noqa: F401
            except ImportError:
                self.logger.warning("lxml not available for benchmarking")
                return None
            return self._timed_run(parser_name, test_case, xml_content, self._run_lxml)
        raise ValueError(f"Unknown parser: {parser_name}")

    def _run_once(self, parser_name: str, test_case: str, xml_content: str) -> Optional[BenchmarkResult]:
        if parser_name == SCANNER_NAME:
            return self.benchmark_scanner(test_case, xml_content)
        return self.benchmark_external_parser(parser_name, test_case, xml_content)

    def _average(self, run_results: List[BenchmarkResult]) -> BenchmarkResult:
        first = run_results[0]
        successful = [r for r in run_results if r.success]
        if not successful:
            return BenchmarkResult(
                parser_name=first.parser_name,
                test_case=first.test_case,
                processing_time_ms=0.0,
                memory_used_mb=0.0,
                characters_processed=first.characters_processed,
                events_generated=0,
                success=False,
                error_message=first.error_message,
            )
        return BenchmarkResult(
            parser_name=first.parser_name,
            test_case=first.test_case,
            processing_time_ms=statistics.mean(r.processing_time_ms for r in successful),
            memory_used_mb=statistics.mean(r.memory_used_mb for r in successful),
            characters_processed=first.characters_processed,
            events_generated=int(statistics.mean(r.events_generated for r in successful)),
            success=True,
        )

    def run_benchmark(self, include_external_parsers: bool = True) -> BenchmarkSuite:
        """Run every test case through every parser.

        Args:
            include_external_parsers: Also benchmark ``xml.sax`` and ``lxml``

        Returns:
            BenchmarkSuite with one averaged result per parser and test case
        """
        suite = BenchmarkSuite(suite_name="Scanner Performance Benchmark")
        parsers = [SCANNER_NAME]
        if include_external_parsers:
            parsers.extend(EXTERNAL_PARSERS)

        self.logger.info(
            "Starting benchmark suite",
            extra={
                "test_cases": len(self.test_cases),
                "parsers": parsers,
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs,
            }
        )

        for test_case, xml_content in self.test_cases.items():
            for parser_name in parsers:
                for _ in range(self.warmup_runs):
                    self._run_once(parser_name, test_case, xml_content)

                run_results = []
                for _ in range(self.benchmark_runs):
                    result = self._run_once(parser_name, test_case, xml_content)
                    if result is not None:
                        run_results.append(result)

                if run_results:
                    suite.add_result(self._average(run_results))

        self.logger.info(
            "Benchmark suite completed",
            extra={
                "total_results": len(suite.results),
                "suite_duration_s": time.time() - suite.timestamp,
            }
        )
        return suite

    def compare_performance(
        self,
        baseline_suite: BenchmarkSuite,
        current_suite: BenchmarkSuite
    ) -> Dict[str, Any]:
        """Compare processing time between two suites.

        Changes larger than 5% in either direction are reported as
        improvements or regressions.
        """
        comparison: Dict[str, Any] = {
            "baseline_timestamp": baseline_suite.timestamp,
            "current_timestamp": current_suite.timestamp,
            "improvements": {},
            "regressions": {},
        }

        for baseline in baseline_suite.results:
            current = current_suite.result_for(baseline.parser_name, baseline.test_case)
            if current is None or not (baseline.success and current.success):
                continue
            if baseline.processing_time_ms <= 0:
                continue

            time_change = (
                (current.processing_time_ms - baseline.processing_time_ms)
                / baseline.processing_time_ms
            )
            entry = {
                "change_percent": time_change * 100,
                "baseline_time_ms": baseline.processing_time_ms,
                "current_time_ms": current.processing_time_ms,
            }
            key = f"{baseline.parser_name}_{baseline.test_case}"
            if time_change < -REGRESSION_THRESHOLD:
                comparison["improvements"][key] = entry
            elif time_change > REGRESSION_THRESHOLD:
                comparison["regressions"][key] = entry

        comparison["summary"] = {
            "total_improvements": len(comparison["improvements"]),
            "total_regressions": len(comparison["regressions"]),
            "has_regressions": bool(comparison["regressions"]),
        }
        return comparison
