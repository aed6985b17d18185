# main.py
import argparse
import json
import logging
import os
import random
from pest_empire.engine import PestControlGame
from pest_empire.diagnostics import Diagnostics
from pest_empire.baselines import random_player, reactive_player, smart_player_wrapper
from pest_empire.scorer import calculate_company_value, format_money
from pest_empire.storage import FileSaveStore
from colorama import Fore, Style, init

init(autoreset=True)

PLAYERS = {
    "Random": random_player,
    "Reactive": reactive_player,
    "Smart": smart_player_wrapper,
}


def _color_for(message):
    if message.startswith(("Cannot", "Lost client", "GAME OVER", "WARNING")):
        return Fore.RED
    if message.startswith("EVENT:"):
        return Fore.MAGENTA
    if message.startswith("AUTO:"):
        return Fore.CYAN
    if message.startswith(("Acquired", "Hired", "Purchased", "VICTORY")) or "promoted" in message:
        return Fore.GREEN
    return Fore.LIGHTBLACK_EX


def run_simulation(seed=42, player=smart_player_wrapper, total_weeks=104, verbose=False, save_path=None):
    storage = FileSaveStore(save_path) if save_path else None
    game = PestControlGame(seed=seed, storage=storage)
    game.new_game()

    diagnostics = Diagnostics(f"seed-{seed}")

    # Enforce determinism for the player's random choices
    random.seed(seed)

    if verbose:
        print(f"{Fore.CYAN}Starting Pest Empire run (seed {seed}){Style.RESET_ALL}")

    for _ in range(total_weeks):
        s = game.state
        if s.game_over:
            break

        log_mark = len(game.log)
        player(game)
        report = game.execute_turn()
        diagnostics.record_turn(game.state, report)

        if verbose:
            print(f"\n{Fore.YELLOW}--- WEEK {report.week} ---{Style.RESET_ALL}")
            print(f"Cash: {format_money(game.state.money)} | Clients: {len(game.state.clients)} "
                  f"| Staff: {len(game.state.employees)} | Net: {format_money(report.net_profit)}")
            for entry in game.log.entries[log_mark:]:
                print(f"{_color_for(entry.message)}{entry.message}{Style.RESET_ALL}")

    value = calculate_company_value(game.state)
    report = diagnostics.generate_report()

    if verbose:
        print(f"\n{Fore.GREEN}Simulation Complete.{Style.RESET_ALL}")
        print(f"Final Company Value: {format_money(value)}")
        print("\n=== DIAGNOSTIC REPORT ===")
        print(f"Strategy: {report['strategy']}")
        print(f"Weeks Played: {report['weeks_played']}")
        print(f"Outcome: {game.state.game_over_reason or 'still running'}")
        print(f"Final Cash: {format_money(report['final_money'])}")
        print(f"Clients / Staff: {report['final_clients']} / {report['final_employees']}")
        print("=========================")

    return value, game.state.game_over_reason


def run_baseline(seeds, total_weeks):
    print(f"{Fore.MAGENTA}=== STARTING BASELINE RUN ==={Style.RESET_ALL}")

    if not os.path.exists("results"):
        os.makedirs("results")

    print(f"{'Seed':<10} | " + " | ".join(f"{name:<14}" for name in PLAYERS))
    print("-" * 60)

    results = {name: {} for name in PLAYERS}
    for seed in seeds:
        print(f"{seed:<10} | ", end="", flush=True)
        for name, func in PLAYERS.items():
            value, outcome = run_simulation(seed, player=func, total_weeks=total_weeks)
            color = Fore.RED if outcome == 'bankruptcy' else Fore.GREEN
            tag = {"bankruptcy": " B", "victory": " V"}.get(outcome, "")
            print(f"{color}{format_money(value)}{tag}{Style.RESET_ALL}".ljust(26), end="")
            results[name][str(seed)] = {"value": value, "outcome": outcome}
        print()

    with open("results/baseline.json", "w") as f:
        json.dump(results, f, indent=2)
    print(f"\n{Fore.CYAN}Results saved to results/baseline.json{Style.RESET_ALL}")


def main():
    parser = argparse.ArgumentParser(description="Run Pest Empire simulations")
    parser.add_argument("--single", action="store_true", help="Play one verbose game")
    parser.add_argument("--player", type=str, default="Smart", choices=sorted(PLAYERS))
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--seeds", type=int, default=8, help="Number of seeds for the baseline table")
    parser.add_argument("--weeks", type=int, default=104)
    parser.add_argument("--save", type=str, default=None, help="Save file for the single run")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.single:
        run_simulation(args.seed, player=PLAYERS[args.player], total_weeks=args.weeks,
                       verbose=True, save_path=args.save)
    else:
        run_baseline(range(args.seed, args.seed + args.seeds), args.weeks)


if __name__ == "__main__":
    main()
