#!/usr/bin/env python3
"""
Interview Answer Grader - Main Entry Point

This script provides a command-line interface to grade a single interview
answer, or to launch the Streamlit practice app.

Usage:
    # Run the Streamlit UI
    python main.py ui

    # Or directly
    streamlit run ui/practice_app.py

    # Grade one answer
    python main.py grade --question "Tell me about a production outage" --answer-file answer.txt
"""
import argparse
import sys
import json
import logging
from pathlib import Path
from typing import Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_ui():
    """Launch the Streamlit UI."""
    import subprocess
    ui_path = Path(__file__).parent / "ui" / "practice_app.py"
    subprocess.run(["streamlit", "run", str(ui_path)])


def read_answer(answer: Optional[str], answer_file: Optional[str]) -> str:
    """Answer text from --answer or --answer-file."""
    if answer_file:
        return Path(answer_file).read_text(encoding="utf-8")
    return answer or ""


def validate_answer(answer: str, max_chars: int) -> Optional[str]:
    """Return an error message when the answer should not be sent for grading."""
    if not answer.strip():
        return "Answer is empty."
    if len(answer) > max_chars:
        return f"Answer is too long ({len(answer)} characters, limit {max_chars})."
    return None


def run_grading(
    question: str,
    answer: str,
    company: Optional[str] = None,
    job_title: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    output_path: Optional[str] = None,
    verbose: bool = False
):
    """
    Grade one answer from the command line.

    Args:
        question: Interview question text
        answer: Candidate answer text
        company: Optional company name
        job_title: Optional role / position
        provider: Generation provider override
        model: Model name override
        output_path: Optional path for output JSON
        verbose: Enable verbose logging

    Returns:
        GradingResult
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    from answer_grader.pipeline import create_grading_pipeline

    pipeline = create_grading_pipeline(provider=provider, model=model, verbose=verbose)

    logger.info("Grading answer...")
    result = pipeline.grade_answer(question, answer, company=company, job_title=job_title)

    if not result.ok:
        logger.warning(f"Grading fell back to the default evaluation ({result.failure.value}): {result.detail}")

    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Results saved to: {output_path}")
    else:
        print("\n" + "="*60)
        print("INTERVIEW ANSWER FEEDBACK")
        print("="*60 + "\n")
        print(result.feedback_text)

        polished = result.evaluation.polished_answer
        if polished:
            print("\n" + "-"*60)
            print("Polished answer:\n")
            print(polished)

    return result


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Interview Answer Grader",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run the web UI
    python main.py ui

    # Grade from command line
    python main.py grade --question "Describe a conflict in your team" --answer "..."

    # Save output to file
    python main.py grade -q "Design a URL shortener" -f answer.txt --output feedback.json
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # UI command
    subparsers.add_parser('ui', help='Launch Streamlit UI')

    # Grade command
    grade_parser = subparsers.add_parser('grade', help='Grade one answer from the command line')
    grade_parser.add_argument(
        '--question', '-q',
        required=True,
        help='Interview question'
    )
    answer_group = grade_parser.add_mutually_exclusive_group(required=True)
    answer_group.add_argument(
        '--answer', '-a',
        help='Candidate answer text'
    )
    answer_group.add_argument(
        '--answer-file', '-f',
        help='Path to a UTF-8 text file holding the answer'
    )
    grade_parser.add_argument(
        '--company',
        help='Company the candidate is interviewing with (optional)'
    )
    grade_parser.add_argument(
        '--job-title',
        help='Role or position (optional)'
    )
    grade_parser.add_argument(
        '--provider',
        choices=['openai', 'ollama'],
        help='Generation provider (default from GENERATION_PROVIDER)'
    )
    grade_parser.add_argument(
        '--model', '-m',
        help='Model name (default from config)'
    )
    grade_parser.add_argument(
        '--output', '-o',
        help='Path for output JSON file (optional)'
    )
    grade_parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    if args.command == 'ui':
        run_ui()
    elif args.command == 'grade':
        from config import GradingConfig

        answer = read_answer(args.answer, args.answer_file)
        error = validate_answer(answer, GradingConfig.MAX_ANSWER_CHARS)
        if error:
            parser.error(error)

        run_grading(
            question=args.question,
            answer=answer,
            company=args.company,
            job_title=args.job_title,
            provider=args.provider,
            model=args.model,
            output_path=args.output,
            verbose=args.verbose
        )
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
