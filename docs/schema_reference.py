"""
Database Schema Reference
=========================

This file provides a quick reference for all database tables, columns and views.
For actual SQLAlchemy models, see: corpusdb/db/models.py
For the view definitions, see: corpusdb/db/views.py

Every foreign key is declared ON UPDATE CASCADE ON DELETE RESTRICT: renumbering a
row propagates to its referrers, deleting a referenced row is refused.
"""

# ============================================================================
# ENUMERATIONS - enum_roles, enum_genders, enum_educations, enum_regions
# ============================================================================
#
# | Column | Type    | Constraints          |
# |--------|---------|----------------------|
# | id     | INTEGER | PRIMARY KEY          |
# | label  | TEXT    | NOT NULL, UNIQUE     |
#
# Contents:
#   enum_roles:      1 regular, 2 supervisor, 3 admin
#   enum_genders:    1 muž, 2 žena
#   enum_educations: 1 ZŠ, 2 SŠ, 3 SOŠ, 4 VŠ
#   enum_regions:    1 severovýchodočeská .. 11 zahraničí (11 rows)


# ============================================================================
# ENUM_PLACES - Places, each inside one region
# ============================================================================
#
# | Column    | Type    | Constraints                  |
# |-----------|---------|------------------------------|
# | id        | INTEGER | PRIMARY KEY                  |
# | label     | TEXT    | NOT NULL, UNIQUE             |
# | region_id | INTEGER | NOT NULL, FK(enum_regions.id)|


# ============================================================================
# USERS - Annotators, supervisors and admins
# ============================================================================
#
# | Column        | Type    | Constraints                |
# |---------------|---------|----------------------------|
# | id            | INTEGER | PRIMARY KEY                |
# | username      | TEXT    | NOT NULL, UNIQUE           |
# | role_id       | INTEGER | NOT NULL, FK(enum_roles.id)|
# | badge         | TEXT    | NULLABLE, UNIQUE           |
# | supervisor_id | INTEGER | NULLABLE, FK(users.id)     |
#
# Rules (enforced by the service layer):
#   - a supervisor must hold the supervisor or admin role
#   - the supervision chain never loops back on itself


# ============================================================================
# PROJECTS / CORPORA
# ============================================================================
#
# projects:
# | Column | Type    | Constraints      |
# |--------|---------|------------------|
# | id     | INTEGER | PRIMARY KEY      |
# | label  | TEXT    | NOT NULL, UNIQUE |
# | badge  | TEXT    | NOT NULL, UNIQUE |
#
# corpora:
# | Column | Type    | Constraints      |
# |--------|---------|------------------|
# | id     | INTEGER | PRIMARY KEY      |
# | label  | TEXT    | NOT NULL, UNIQUE |


# ============================================================================
# SPEAKERS - Recorded people, registered by a user within a project
# ============================================================================
#
# | Column       | Type    | Constraints                     |
# |--------------|---------|---------------------------------|
# | id           | INTEGER | PRIMARY KEY                     |
# | user_id      | INTEGER | NOT NULL, FK(users.id)          |
# | project_id   | INTEGER | NOT NULL, FK(projects.id)       |
# | nickname     | TEXT    | NOT NULL                        |
# | gender_id    | INTEGER | NOT NULL, FK(enum_genders.id)   |
# | education_id | INTEGER | NOT NULL, FK(enum_educations.id)|
# | place_id     | INTEGER | NOT NULL, FK(enum_places.id)    |
# | year         | INTEGER | NOT NULL (year of birth)        |


# ============================================================================
# DOCS - Recordings / transcripts
# ============================================================================
#
# | Column         | Type      | Constraints                  |
# |----------------|-----------|------------------------------|
# | id             | INTEGER   | PRIMARY KEY                  |
# | project_id     | INTEGER   | NOT NULL, FK(projects.id)    |
# | corpus_id      | INTEGER   | NULLABLE, FK(corpora.id)     |
# | assigned_to_id | INTEGER   | NULLABLE, FK(users.id)       |
# | assigned_by_id | INTEGER   | NULLABLE, FK(users.id)       |
# | done           | BOOLEAN   | NULLABLE                     |
# | date           | TIMESTAMP | NOT NULL                     |
# | place_id       | INTEGER   | NOT NULL, FK(enum_places.id) |
#
# Workflow state derived from done:
#   NULL  -> unassigned
#   FALSE -> in_progress
#   TRUE  -> done
#
# Label: YY + assigner badge + zero-padded id + project badge, e.g. 19S001N


# ============================================================================
# DOC2SPEAKER - Speakers taking part in a doc
# ============================================================================
#
# | Column     | Type    | Constraints              |
# |------------|---------|--------------------------|
# | id         | INTEGER | PRIMARY KEY              |
# | doc_id     | INTEGER | NOT NULL, FK(docs.id)    |
# | speaker_id | INTEGER | NOT NULL, FK(speakers.id)|
# | words      | INTEGER | NULLABLE                 |


# ============================================================================
# VIEWS (recomputed on every read)
# ============================================================================
#
# view_geo:          place_id, place, region
# view_speakers:     id, project, nickname, gender, education, place, region, year
# view_docs:         id, project, corpus, place, region, date
#                    (docs without a corpus are left out)
# view_doc2speaker:  id, project, corpus, doc_place, doc_region, gender, age,
#                    education, spk_place, spk_region, words
#
#   age:       mladší if (doc year - birth year) < 35 else starší
#   education: vyšší if education label is VŠ else nižší


# ============================================================================
# ENTITY RELATIONSHIP DIAGRAM (Simplified)
# ============================================================================
#
#  ┌──────────────┐        ┌──────────────┐
#  │ enum_regions │◄───────│ enum_places  │◄──────────────┐
#  └──────────────┘        └──────────────┘               │
#                                 ▲                       │
#  ┌──────────────┐               │                       │
#  │    users     │◄─┐            │                       │
#  ├──────────────┤  │     ┌──────────────┐        ┌──────────────┐
#  │ id (PK)      │  └─────│   speakers   │        │     docs     │
#  │ role_id (FK) │        ├──────────────┤        ├──────────────┤
#  │ badge        │        │ user_id      │        │ project_id   │
#  │ supervisor_id│──┐     │ project_id   │        │ corpus_id    │
#  └──────────────┘  │     │ demographics │        │ assigned_*   │
#         ▲          │     └──────────────┘        │ done, date   │
#         └──────────┘            ▲                └──────────────┘
#       (supervision)             │  N:1                  ▲
#                                 │                       │ N:1
#                          ┌──────────────────────────────┴─┐
#                          │          doc2speaker           │
#                          ├────────────────────────────────┤
#                          │ doc_id, speaker_id, words      │
#                          └────────────────────────────────┘
