import json
from typing import List, Optional

import typer

from .activity import MET_BY_CATEGORY, calculate_burned_calories
from .energy import activity_factor, calculate_rer, calculate_target_nutrients
from .ledger import summarize_day
from .models import ActivityCategory, InvalidInput, WeatherCondition
from .settings import Settings, configure_logging
from .store import connect_db, find_log, init_db

app = typer.Typer(help="Dog health utilities")


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=2)


@app.callback()
def main() -> None:
    configure_logging(Settings.from_env())


@app.command()
def targets(
    weight_kg: float = typer.Option(..., help="Dog weight in kg"),
    age: int = typer.Option(..., help="Dog age in whole years"),
    weather: WeatherCondition = typer.Option(WeatherCondition.CLOUDY, help="Today's weather"),
    habit: Optional[List[ActivityCategory]] = typer.Option(None, help="Usual activity; repeat for several"),
) -> None:
    """Compute RER, activity factor and the daily nutrient targets."""
    habits = habit or []
    try:
        rer = calculate_rer(weight_kg)
        factor = activity_factor(age, habits)
        profile = calculate_target_nutrients(weight_kg, age, weather, habits)
    except InvalidInput as exc:
        _fail(exc)

    typer.echo(
        json.dumps(
            {
                "weight_kg": weight_kg,
                "age": age,
                "weather": weather.value,
                "habits": [h.value for h in habits],
                "activity_factor": round(factor, 2),
                "rer": round(rer, 2),
                "targets": profile.to_dict(),
            },
            ensure_ascii=False,
        )
    )


@app.command()
def burn(
    weight_kg: float = typer.Option(..., help="Dog weight in kg"),
    category: ActivityCategory = typer.Option(..., help="Activity category"),
    minutes: float = typer.Option(..., help="Duration in minutes"),
) -> None:
    """Estimate calories burned by one activity."""
    try:
        burned = calculate_burned_calories(weight_kg, category, minutes)
    except InvalidInput as exc:
        _fail(exc)
    typer.echo(json.dumps({"category": category.value, "met": MET_BY_CATEGORY[category], "calories_burned": burned}))


@app.command()
def summary(
    date: str = typer.Option(..., help="Day to summarize, YYYY-MM-DD"),
    db: Optional[str] = typer.Option(None, help="Store path (defaults to PAWPAL_DB_PATH)"),
) -> None:
    """Print consumed, burned and net calories for a stored day."""
    db_path = db or str(Settings.from_env().db_path)
    conn = connect_db(db_path)
    try:
        init_db(conn)
        log = find_log(conn, date)
    finally:
        conn.close()
    if log is None:
        typer.echo(f"No log for {date}", err=True)
        raise typer.Exit(code=1)

    stats = summarize_day(log)
    typer.echo(
        json.dumps(
            {
                "date": log.date,
                "weather": log.weather.value,
                "consumed": stats.consumed.to_dict(),
                "burned": stats.burned,
                "net_calories": stats.net_calories,
                "activity_minutes": stats.activity_minutes,
                "target": log.profile_snapshot.target_nutrients.to_dict(),
            },
            ensure_ascii=False,
        )
    )


if __name__ == "__main__":
    app()
