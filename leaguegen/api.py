"""
REST API for the league generator.
Thin wrappers around the season service and the entity store.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Generator

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from leaguegen import __version__
from leaguegen.logging_config import configure_logging
from leaguegen.persistence import (
    get_connection,
    init_db,
    get_db_path,
    NationRepository,
    ClubRepository,
    LeagueRepository,
    SeasonRepository,
    LeagueTableRepository,
    MatchRepository,
)
from leaguegen.services.season_service import (
    ClubNotFoundError,
    GeneratedSeason,
    LeagueNotFoundError,
    SeasonAlreadyExistsError,
    SeasonGenerationService,
)
from leaguegen.simulation import simulation_to_dict

logger = logging.getLogger(__name__)


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()
    init_db(db_path=get_db_path())
    logger.info("Entity store ready at %s", get_db_path())
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="League Generator API",
    description="Clubs, leagues and simulated seasons for a fictional football universe",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Request models ----------


class CreateNationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class CreateClubRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    nation_id: str
    league_id: str | None = None
    stability_points: int = 0
    league_titles: int = Field(0, ge=0)
    promotions: int = Field(0, ge=0)
    relegations: int = Field(0, ge=0)
    vcc_titles: int = Field(0, ge=0)
    ccc_titles: int = Field(0, ge=0)
    is_defunct: bool = False
    is_former_name: bool = False


class UpdateClubRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    league_id: str | None = None
    stability_points: int | None = None
    league_titles: int | None = Field(None, ge=0)
    promotions: int | None = Field(None, ge=0)
    relegations: int | None = Field(None, ge=0)
    vcc_titles: int | None = Field(None, ge=0)
    ccc_titles: int | None = Field(None, ge=0)
    is_defunct: bool | None = None
    is_former_name: bool | None = None


class CreateLeagueRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    nation_id: str
    tier: int = Field(1, ge=1, description="1 = top flight")
    promotion_spots: int = Field(2, ge=0)
    relegation_spots: int = Field(3, ge=0)


class SyncClubStatsRequest(BaseModel):
    club_ids: list[str] | None = Field(None, description="Clubs to recount; default: every club")


class UpdateLeagueRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    tier: int | None = Field(None, ge=1)
    promotion_spots: int | None = Field(None, ge=0)
    relegation_spots: int | None = Field(None, ge=0)


class GenerateSeasonRequest(BaseModel):
    year: str = Field(..., min_length=1, max_length=20, description="Season label, e.g. '1995' or '1995-96'")
    club_ids: list[str] | None = Field(None, description="Participating clubs; default: last season's clubs")
    seed: int | None = Field(None, description="RNG seed; omitted => a fresh seed is drawn and returned")


class SaveSeasonRequest(GenerateSeasonRequest):
    seed: int = Field(..., description="Seed of the previewed season to save")
    store_fixtures: bool = False


# ---------- Helpers ----------


def _generated_payload(generated: GeneratedSeason) -> dict[str, Any]:
    d = simulation_to_dict(generated.simulation)
    d["league_id"] = generated.league.id
    d["league_name"] = generated.league.name
    d["year"] = generated.year
    return d


def _generate_or_raise(conn, svc: SeasonGenerationService, league_id: str, req: GenerateSeasonRequest) -> GeneratedSeason:
    try:
        return svc.generate(conn, league_id, req.year, club_ids=req.club_ids, seed=req.seed)
    except (LeagueNotFoundError, ClubNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---------- Health ----------


@app.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "version": __version__}


# ---------- Nations ----------


@app.post("/nations")
def create_nation(req: CreateNationRequest) -> dict[str, Any]:
    with db_conn() as conn:
        return NationRepository().create(conn, req.name).to_dict()


@app.get("/nations")
def list_nations() -> dict[str, Any]:
    with db_conn() as conn:
        return {"nations": [n.to_dict() for n in NationRepository().list_all(conn)]}


# ---------- Clubs ----------


@app.post("/clubs")
def create_club(req: CreateClubRequest) -> dict[str, Any]:
    with db_conn() as conn:
        if NationRepository().get(conn, req.nation_id) is None:
            raise HTTPException(status_code=404, detail="Nation not found")
        if req.league_id is not None and LeagueRepository().get(conn, req.league_id) is None:
            raise HTTPException(status_code=404, detail="League not found")
        fields = req.model_dump(exclude={"name", "nation_id", "league_id"})
        club = ClubRepository().create(conn, req.name, req.nation_id, league_id=req.league_id, **fields)
        return club.to_dict()


@app.get("/clubs")
def list_clubs(
    nation_id: str | None = Query(None),
    league_id: str | None = Query(None),
) -> dict[str, Any]:
    with db_conn() as conn:
        clubs = ClubRepository().list_all(conn, nation_id=nation_id, league_id=league_id)
        return {"clubs": [c.to_dict() for c in clubs]}


@app.post("/clubs/sync-stats")
def sync_club_stats(req: SyncClubStatsRequest | None = None) -> dict[str, Any]:
    """Recount titles, promotions and relegations from saved league tables."""
    club_ids = req.club_ids if req is not None else None
    with db_conn() as conn:
        try:
            report = SeasonGenerationService().sync_club_stats(conn, club_ids)
        except ClubNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {
            "updated_club_ids": report.updated_club_ids,
            "skipped_club_ids": report.skipped_club_ids,
        }


@app.get("/clubs/{club_id}")
def get_club(club_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        club = ClubRepository().get(conn, club_id)
        if club is None:
            raise HTTPException(status_code=404, detail="Club not found")
        return club.to_dict()


@app.patch("/clubs/{club_id}")
def update_club(club_id: str, req: UpdateClubRequest) -> dict[str, Any]:
    # league_id=null removes the club from its league; other nulls are ignored
    fields = {
        k: v for k, v in req.model_dump(exclude_unset=True).items()
        if v is not None or k == "league_id"
    }
    with db_conn() as conn:
        repo = ClubRepository()
        if repo.get(conn, club_id) is None:
            raise HTTPException(status_code=404, detail="Club not found")
        if fields.get("league_id") is not None and LeagueRepository().get(conn, fields["league_id"]) is None:
            raise HTTPException(status_code=404, detail="League not found")
        club = repo.update(conn, club_id, **fields)
        return club.to_dict()


# ---------- Leagues ----------


@app.post("/leagues")
def create_league(req: CreateLeagueRequest) -> dict[str, Any]:
    with db_conn() as conn:
        if NationRepository().get(conn, req.nation_id) is None:
            raise HTTPException(status_code=404, detail="Nation not found")
        league = LeagueRepository().create(
            conn, req.name, req.nation_id,
            tier=req.tier,
            promotion_spots=req.promotion_spots,
            relegation_spots=req.relegation_spots,
        )
        return league.to_dict()


@app.get("/leagues")
def list_leagues(nation_id: str | None = Query(None)) -> dict[str, Any]:
    with db_conn() as conn:
        return {"leagues": [lg.to_dict() for lg in LeagueRepository().list_all(conn, nation_id=nation_id)]}


@app.get("/leagues/{league_id}")
def get_league(league_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        league = LeagueRepository().get(conn, league_id)
        if league is None:
            raise HTTPException(status_code=404, detail="League not found")
        return league.to_dict()


@app.patch("/leagues/{league_id}")
def update_league(league_id: str, req: UpdateLeagueRequest) -> dict[str, Any]:
    """Change tier or promotion/relegation places; applies to seasons generated afterwards."""
    fields = {k: v for k, v in req.model_dump(exclude_unset=True).items() if v is not None}
    with db_conn() as conn:
        league = LeagueRepository().update(conn, league_id, **fields)
        if league is None:
            raise HTTPException(status_code=404, detail="League not found")
        return league.to_dict()


@app.get("/leagues/{league_id}/eligible-clubs")
def eligible_clubs(league_id: str, year: str = Query(..., min_length=1)) -> dict[str, Any]:
    """Clubs that may take part in `year`, flagged with last season's default selection."""
    with db_conn() as conn:
        svc = SeasonGenerationService()
        try:
            clubs = svc.list_eligible_clubs(conn, league_id)
        except LeagueNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        selected = set(svc.default_selection(conn, league_id, year))
        payload = []
        for c in clubs:
            d = c.to_dict()
            d["selected"] = c.id in selected
            payload.append(d)
        return {"league_id": league_id, "year": year, "clubs": payload, "selected_count": len(selected)}


# ---------- Seasons ----------


@app.post("/leagues/{league_id}/seasons/generate")
def generate_season(league_id: str, req: GenerateSeasonRequest) -> dict[str, Any]:
    """Preview a simulated season. Nothing is saved; call again to regenerate."""
    with db_conn() as conn:
        generated = _generate_or_raise(conn, SeasonGenerationService(), league_id, req)
        return _generated_payload(generated)


@app.post("/leagues/{league_id}/seasons")
def save_season(league_id: str, req: SaveSeasonRequest) -> dict[str, Any]:
    """
    Re-run the previewed season from its seed and save it.
    Best-effort: a partial save returns complete=false with the clubs whose rows failed.
    """
    with db_conn() as conn:
        svc = SeasonGenerationService()
        generated = _generate_or_raise(conn, svc, league_id, req)
        try:
            report = svc.save(conn, generated, store_fixtures=req.store_fixtures)
        except SeasonAlreadyExistsError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return {
            "season": report.season.to_dict(),
            "rows_written": report.rows_written,
            "failed_club_ids": report.failed_club_ids,
            "fixtures_written": report.fixtures_written,
            "fixtures_failed": report.fixtures_failed,
            "complete": report.complete,
            "table": _generated_payload(generated)["table"],
        }


@app.get("/leagues/{league_id}/seasons")
def list_seasons(league_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        if LeagueRepository().get(conn, league_id) is None:
            raise HTTPException(status_code=404, detail="League not found")
        seasons = SeasonRepository().list_by_league(conn, league_id)
        return {"league_id": league_id, "seasons": [s.to_dict() for s in seasons]}


@app.get("/seasons/{season_id}/table")
def get_season_table(season_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        season = SeasonRepository().get(conn, season_id)
        if season is None:
            raise HTTPException(status_code=404, detail="Season not found")
        rows = LeagueTableRepository().list_by_season(conn, season_id)
        return {"season": season.to_dict(), "table": [r.to_dict() for r in rows]}


@app.get("/seasons/{season_id}/matches")
def get_season_matches(season_id: str) -> dict[str, Any]:
    with db_conn() as conn:
        if SeasonRepository().get(conn, season_id) is None:
            raise HTTPException(status_code=404, detail="Season not found")
        matches = MatchRepository().list_by_season(conn, season_id)
        return {"season_id": season_id, "matches": [m.to_dict() for m in matches]}


# ---------- Run with: uvicorn leaguegen.api:app --reload ----------
