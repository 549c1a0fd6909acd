import argparse, logging, os, sys

from bapi_analyzer.analyzer import analyze_document, parse_document
from bapi_analyzer.document_source import file_label, read_local_text
from bapi_analyzer.errors import AnalyzerError

def parse_args():
    p = argparse.ArgumentParser(description="Search a BAPI JSON file for a property and print the analysis report.")
    p.add_argument("file_path")
    p.add_argument("search_property")
    p.add_argument("--value", dest="search_value", default=None, help="Only match nodes whose property equals this string")
    p.add_argument("--distinct_only", action="store_true", help="Print only the distinct values report")
    return p.parse_args()

def main() -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    args = parse_args()

    try:
        text = read_local_text(args.file_path)
        result = analyze_document(
            parse_document(text),
            args.search_property,
            args.search_value or None,
            file_label=file_label(args.file_path),
        )
    except AnalyzerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = result.report
    if args.distinct_only:
        if not report.distinct_values_report:
            print("Error: --distinct_only cannot be combined with --value", file=sys.stderr)
            return 2
        print(report.distinct_values_report)
        return 0

    print(report.main_report)
    if report.distinct_values_report:
        print("\n--- Distinct Values Report ---")
        print(report.distinct_values_report)
    return 0

if __name__ == "__main__":
    sys.exit(main())
