"""
Idempotent seed script.
Usage:
  python seed.py --reset    # drop and recreate the tables, then load demo data
  python seed.py            # load demo data only if there are no teachers yet
"""
from __future__ import annotations
import argparse

from storage import Storage
from storage.schemas import SchoolClassIn, SubjectIn, TeacherIn

# (name, knowledge area)
DEMO_TEACHERS = [
    ("Ana Souza", "Matemática"),
    ("Bruno Lima", "Matemática"),
    ("Carla Mendes", "Matemática"),
    ("Diego Rocha", "Linguagens"),
    ("Elisa Prado", "Linguagens"),
    ("Fábio Nunes", "Ciências da Natureza"),
    ("Gabriela Alves", "Ciências da Natureza"),
    ("Heitor Campos", "Ciências Humanas"),
    ("Isabela Duarte", "Ciências Humanas"),
]

DEMO_SUBJECTS = [
    ("Matemática", "Matemática"),
    ("Geometria", "Matemática"),
    ("Português", "Linguagens"),
    ("Inglês", "Linguagens"),
    ("Física", "Ciências da Natureza"),
    ("Química", "Ciências da Natureza"),
    ("Biologia", "Ciências da Natureza"),
    ("História", "Ciências Humanas"),
    ("Geografia", "Ciências Humanas"),
]

DEMO_CLASSES = ["1º Ano A", "1º Ano B", "2º Ano A", "2º Ano B", "3º Ano A"]


def seed_demo(storage: Storage) -> int:
    """Fill an empty directory with demo teachers, subjects and classes.

    Returns the number of records created (0 when teachers already exist).
    """
    if storage.list_teachers():
        return 0
    created = 0
    for name, area in DEMO_TEACHERS:
        storage.create_teacher(TeacherIn(name=name, knowledge_area=area))
        created += 1
    existing_subjects = {s.name for s in storage.list_subjects()}
    for name, area in DEMO_SUBJECTS:
        if name not in existing_subjects:
            storage.create_subject(SubjectIn(name=name, knowledge_area=area))
            created += 1
    existing_classes = {c.name for c in storage.list_classes()}
    for name in DEMO_CLASSES:
        if name not in existing_classes:
            storage.create_class(SchoolClassIn(name=name))
            created += 1
    return created


def main(argv: list[str] | None = None) -> None:
    from app import create_app
    from extensions import db

    parser = argparse.ArgumentParser(description="Load demo data")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    parser.add_argument("--config", default=None, help="config name (dev/prod), FLASK_CONFIG by default")
    args = parser.parse_args(argv)

    app = create_app(args.config)
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        created = seed_demo(app.extensions["storage"])
        print(f"seeded {created} records")


if __name__ == "__main__":
    main()
