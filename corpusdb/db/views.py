"""Derived, non-materialized views over the corpus tables.

Each view is defined once as a SQLAlchemy ``select()`` and installed with
``CREATE VIEW`` right after the tables, so every read recomputes it from the
current table state. The ``Table`` objects below live in their own metadata and
are only used to query the views; ``create_all`` never creates them as tables.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Table,
    Text,
    case,
    event,
    extract,
    literal,
    select,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.schema import DDLElement

from corpusdb.db.models import (
    Base,
    Corpus,
    Doc,
    DocToSpeaker,
    EnumEducation,
    EnumGender,
    EnumPlace,
    EnumRegion,
    Project,
    Speaker,
)

# Age is measured at the document date, not against the current year.
AGE_THRESHOLD = 35
AGE_YOUNGER = "mladší"
AGE_OLDER = "starší"

HIGHEST_EDUCATION = "VŠ"
EDUCATION_HIGHER = "vyšší"
EDUCATION_LOWER = "nižší"


class CreateView(DDLElement):
    inherit_cache = False

    def __init__(self, name, selectable):
        self.name = name
        self.selectable = selectable


class DropView(DDLElement):
    inherit_cache = False

    def __init__(self, name):
        self.name = name


def _view_body(element, compiler):
    return compiler.sql_compiler.process(element.selectable, literal_binds=True)


@compiles(CreateView)
def _create_view(element, compiler, **kw):
    return f"CREATE VIEW {element.name} AS {_view_body(element, compiler)}"


@compiles(CreateView, "sqlite")
def _create_view_sqlite(element, compiler, **kw):
    return f"CREATE VIEW IF NOT EXISTS {element.name} AS {_view_body(element, compiler)}"


@compiles(CreateView, "postgresql")
def _create_view_postgresql(element, compiler, **kw):
    return f"CREATE OR REPLACE VIEW {element.name} AS {_view_body(element, compiler)}"


@compiles(DropView)
def _drop_view(element, compiler, **kw):
    return f"DROP VIEW IF EXISTS {element.name}"


view_metadata = MetaData()

view_geo = Table(
    "view_geo",
    view_metadata,
    Column("place_id", Integer),
    Column("place", Text),
    Column("region", Text),
)

view_speakers = Table(
    "view_speakers",
    view_metadata,
    Column("id", Integer),
    Column("project", Text),
    Column("nickname", Text),
    Column("gender", Text),
    Column("education", Text),
    Column("place", Text),
    Column("region", Text),
    Column("year", Integer),
)

view_docs = Table(
    "view_docs",
    view_metadata,
    Column("id", Integer),
    Column("project", Text),
    Column("corpus", Text),
    Column("place", Text),
    Column("region", Text),
    Column("date", DateTime),
)

view_doc2speaker = Table(
    "view_doc2speaker",
    view_metadata,
    Column("id", Integer),
    Column("project", Text),
    Column("corpus", Text),
    Column("doc_place", Text),
    Column("doc_region", Text),
    Column("gender", Text),
    Column("age", Text),
    Column("education", Text),
    Column("spk_place", Text),
    Column("spk_region", Text),
    Column("words", Integer),
)


def age_bracket(doc_date, birth_year):
    """SQL expression: age at the document date collapsed to two brackets."""
    return case(
        (extract("year", doc_date) - birth_year < AGE_THRESHOLD, literal(AGE_YOUNGER)),
        else_=literal(AGE_OLDER),
    )


def education_bracket(education_label):
    """SQL expression: education label collapsed to higher/lower."""
    return case(
        (education_label == HIGHEST_EDUCATION, literal(EDUCATION_HIGHER)),
        else_=literal(EDUCATION_LOWER),
    )


geo_query = select(
    EnumPlace.id.label("place_id"),
    EnumPlace.label.label("place"),
    EnumRegion.label.label("region"),
).join_from(EnumPlace, EnumRegion, EnumPlace.region_id == EnumRegion.id)

speakers_query = (
    select(
        Speaker.id.label("id"),
        Project.label.label("project"),
        Speaker.nickname.label("nickname"),
        EnumGender.label.label("gender"),
        EnumEducation.label.label("education"),
        view_geo.c.place,
        view_geo.c.region,
        Speaker.year.label("year"),
    )
    .select_from(Speaker)
    .join(Project, Project.id == Speaker.project_id)
    .join(EnumGender, EnumGender.id == Speaker.gender_id)
    .join(EnumEducation, EnumEducation.id == Speaker.education_id)
    .join(view_geo, view_geo.c.place_id == Speaker.place_id)
)

docs_query = (
    select(
        Doc.id.label("id"),
        Project.label.label("project"),
        Corpus.label.label("corpus"),
        view_geo.c.place,
        view_geo.c.region,
        Doc.date.label("date"),
    )
    .select_from(Doc)
    .join(Project, Project.id == Doc.project_id)
    .join(Corpus, Corpus.id == Doc.corpus_id)
    .join(view_geo, view_geo.c.place_id == Doc.place_id)
)

doc2speaker_query = (
    select(
        DocToSpeaker.id.label("id"),
        view_docs.c.project,
        view_docs.c.corpus,
        view_docs.c.place.label("doc_place"),
        view_docs.c.region.label("doc_region"),
        view_speakers.c.gender,
        age_bracket(view_docs.c.date, view_speakers.c.year).label("age"),
        education_bracket(view_speakers.c.education).label("education"),
        view_speakers.c.place.label("spk_place"),
        view_speakers.c.region.label("spk_region"),
        DocToSpeaker.words.label("words"),
    )
    .select_from(DocToSpeaker)
    .join(view_speakers, DocToSpeaker.speaker_id == view_speakers.c.id)
    .join(view_docs, DocToSpeaker.doc_id == view_docs.c.id)
)

# Creation order matters: later views select from earlier ones.
VIEW_DEFINITIONS = [
    ("view_geo", geo_query),
    ("view_speakers", speakers_query),
    ("view_docs", docs_query),
    ("view_doc2speaker", doc2speaker_query),
]

for _name, _query in VIEW_DEFINITIONS:
    event.listen(Base.metadata, "after_create", CreateView(_name, _query))

for _name, _query in reversed(VIEW_DEFINITIONS):
    event.listen(Base.metadata, "before_drop", DropView(_name))
