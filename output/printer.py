"""Pretty-print bracket output."""

from tabulate import tabulate

from models.bracket import Matchup, Round, Tournament

EMPTY_SLOT = "___"


def format_matchup(matchup: Matchup, tournament: Tournament | None = None) -> str:
    """Render a matchup as "TeamA vs TeamB", tagging the winner with (won)."""
    sides = []
    for slot, name in enumerate(matchup.teams):
        if name is None:
            sides.append(EMPTY_SLOT)
            continue
        team = tournament.teams.get(name) if tournament else None
        text = str(team) if team else name
        if matchup.winner_slot == slot:
            text += " (won)"
        sides.append(text)
    return f"{sides[0]} vs {sides[1]}"


def format_round(rnd: Round, tournament: Tournament | None = None) -> str:
    lines = [str(rnd.kind)]
    lines.extend(f"  {format_matchup(m, tournament)}" for m in rnd)
    return "\n".join(lines)


def format_tournament(tournament: Tournament) -> str:
    """Every round in order (play-in first), matchups in bracket order."""
    rounds = list(tournament.rounds)
    if tournament.play_in is not None:
        rounds.insert(0, tournament.play_in)
    return "\n\n".join(format_round(rnd, tournament) for rnd in rounds)


def print_bracket(tournament: Tournament):
    """Print the full bracket in a readable format."""
    print("\n" + "=" * 60)
    print("           BRACKET")
    print("=" * 60 + "\n")
    print(format_tournament(tournament))

    print("\n" + "=" * 60)
    if tournament.champion:
        champion = tournament.teams.get(tournament.champion, tournament.champion)
        print(f"  CHAMPION: {champion}")
    else:
        print("  Bracket not finished")
    print("=" * 60)


def print_summary_table(tournament: Tournament):
    """Print a table of every decided pick, round by round."""
    print("\n=== PICKS SUMMARY ===\n")

    rows = []
    for rnd in tournament.rounds:
        for matchup in rnd:
            if not matchup.is_decided:
                continue
            team = tournament.teams.get(matchup.winner)
            rows.append([
                str(rnd.kind),
                matchup.index,
                matchup.winner,
                team.seed.value if team else "",
                team.region.value if team else "",
                matchup.loser or "",
            ])

    headers = ["Round", "Game", "Winner", "Seed", "Region", "Beat"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
