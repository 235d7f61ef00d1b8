#!/usr/bin/env python3
"""
Database initialization script for Quizbuilder
Creates the tables directly for the SQL backend, or prints the PostgreSQL
DDL to paste into the Supabase SQL editor.
"""

import sys

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from quizbuilder.config import settings
from quizbuilder.database import Base, create_sql_engine, init_models


def postgres_ddl() -> str:
    """Render CREATE TABLE/INDEX statements, including the partial unique index"""
    import quizbuilder.models  # noqa: F401
    dialect = postgresql.dialect()
    statements = []
    for table in Base.metadata.sorted_tables:
        statements.append(str(CreateTable(table).compile(dialect=dialect)).strip() + ";")
        for index in sorted(table.indexes, key=lambda i: i.name):
            statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip() + ";")
    return "\n\n".join(statements)


def init_database():
    try:
        if settings.database_backend == "sql":
            print(f"🔄 Creating tables on {settings.database_url} ...")
            init_models(create_sql_engine(settings.database_url))
            print("✅ Tables created: modules, exercises, alternatives")
            return True

        print("📋 Run the following SQL in your Supabase dashboard (SQL Editor):\n")
        print(postgres_ddl())
        print("\n🔒 unique_correct_alternative allows one correct alternative per exercise;")
        print("   the unique_*_order constraints keep positions unique within each parent.")
        print("   Exercise deletion also expects a delete_exercise_nuclear(exercise_id_param, module_id_param) function.")
        return True

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        print("\n💡 Troubleshooting:")
        print("1. Check DATABASE_BACKEND and DATABASE_URL in your .env file")
        print("2. Verify the database server is reachable")
        return False

if __name__ == "__main__":
    sys.exit(0 if init_database() else 1)
