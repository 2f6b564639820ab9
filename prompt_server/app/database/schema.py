"""
Copyright (c) 2024, 2026, Oracle and/or its affiliates.
Licensed under the Universal Permissive License v1.0 as shown at http://oss.oracle.com/licenses/upl.

Raw DDL statements for the key-value substrate table.
"""

KV_TABLE = "prompt_kv"

SCHEMA_DDL = [
    f"""
    CREATE TABLE IF NOT EXISTS {KV_TABLE} (
        kv_key    VARCHAR2(1024) NOT NULL,
        kv_value  CLOB,
        updated   TIMESTAMP(9) WITH LOCAL TIME ZONE DEFAULT SYSTIMESTAMP,
        CONSTRAINT {KV_TABLE}_pk PRIMARY KEY (kv_key)
    )
    """,
]
