import os, sys
BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE not in sys.path:
    sys.path.insert(0, BASE)
from quiz_admin.errors import ValidationError
from quiz_admin.services.quiz_import import parse_quiz_upload


def main():
    if len(sys.argv) < 2:
        print("Usage: check_upload.py <quizzes.json> [<more.json> ...]")
        sys.exit(1)

    failed = False
    for path in sys.argv[1:]:
        with open(path, "rb") as fh:
            raw = fh.read()
        try:
            quizzes = parse_quiz_upload(os.path.basename(path), None, raw)
        except ValidationError as e:
            failed = True
            print(f"✗ {path}")
            for msg in e.errors or [str(e)]:
                print(f"    {msg}")
            continue
        questions = sum(len(q.questions) for q in quizzes)
        print(f"✓ {path}: {len(quizzes)} quizzes, {questions} questions")

    sys.exit(1 if failed else 0)

if __name__ == "__main__":
    main()
