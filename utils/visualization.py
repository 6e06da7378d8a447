# utils/visualization.py — Charts: bucket SIP split, goal corpus paths

import os

import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec

from config import SHORT, LONG, BUCKET_DISPLAY

plt.rcParams["figure.facecolor"]  = "#0d1117"
plt.rcParams["axes.facecolor"]    = "#161b22"
plt.rcParams["axes.edgecolor"]    = "#30363d"
plt.rcParams["axes.labelcolor"]   = "#c9d1d9"
plt.rcParams["text.color"]        = "#c9d1d9"
plt.rcParams["xtick.color"]       = "#8b949e"
plt.rcParams["ytick.color"]       = "#8b949e"
plt.rcParams["grid.color"]        = "#21262d"
plt.rcParams["font.family"]       = "monospace"


def _rupees(x, _):
    return f"Rs.{x/1e5:.0f}L" if x < 1e7 else f"Rs.{x/1e7:.1f}Cr"


def plot_plan_dashboard(plan: dict, save_path: str = "outputs/plan_dashboard.png"):
    """
    3-panel dashboard:
      Panel 1: Monthly SIP per goal, coloured by bucket
      Panel 2: Target vs linked holdings per goal
      Panel 3: Suggested fund split of the total SIP
    """
    table   = plan["table"]
    buckets = plan["buckets"]
    colors  = {SHORT: "#ffe66d", LONG: "#00ff88"}

    fig = plt.figure(figsize=(18, 6))
    gs  = gridspec.GridSpec(1, 3, figure=fig, wspace=0.35)

    # ── Panel 1: SIP per goal ──────────────────────────────────────────
    ax1 = fig.add_subplot(gs[0, 0])
    names = [str(n)[:14] for n in table["name"]]
    ax1.barh(names, table["monthly_sip"], color=[colors.get(b, "#8b949e") for b in table["bucket"]],
             edgecolor="#30363d")
    ax1.set_xlabel("Rs. / month")
    ax1.set_title("Required SIP by Goal", fontsize=11)
    ax1.grid(True, axis="x", alpha=0.3)

    # ── Panel 2: Target vs linked ──────────────────────────────────────
    ax2 = fig.add_subplot(gs[0, 1])
    x = range(len(table))
    ax2.bar(x, table["inflation_adjusted_target"], color="#4ecdc4", alpha=0.5, label="Target")
    ax2.bar(x, table["linked_amount"], color="#ff6b35", alpha=0.9, label="Linked holdings")
    ax2.set_xticks(list(x))
    ax2.set_xticklabels(names, rotation=45, ha="right", fontsize=7)
    ax2.yaxis.set_major_formatter(plt.FuncFormatter(_rupees))
    ax2.set_title("Target vs Existing Holdings", fontsize=11)
    ax2.legend(fontsize=8)
    ax2.grid(True, axis="y", alpha=0.3)

    # ── Panel 3: Fund split ────────────────────────────────────────────
    ax3 = fig.add_subplot(gs[0, 2])
    split = {}
    for bucket in (SHORT, LONG):
        for fund, amount in buckets[bucket]["allocation"].items():
            label = fund.replace("_", " ").title()
            split[label] = split.get(label, 0) + amount
    split = pd.Series(split)
    split = split[split > 0]
    if not split.empty:
        ax3.pie(split.values, labels=split.index, autopct="%1.1f%%",
                colors=["#ffe66d", "#00ff88", "#4ecdc4", "#a8dadc"][:len(split)],
                textprops={"color": "#c9d1d9", "fontsize": 8})
    ax3.set_title("Suggested Fund Split", fontsize=11)

    fig.suptitle(f"Goal Funding Plan  |  Total SIP Rs.{plan['total_sip']:,.0f}/month",
                 fontsize=14, color="#c9d1d9", y=1.02)
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    plt.savefig(save_path, dpi=150, bbox_inches="tight", facecolor="#0d1117")
    plt.close()
    print(f"  ✓ Saved: {save_path}")


def plot_goal_projection(
    yearly: pd.DataFrame,
    goal_name: str,
    projection: dict,
    save_path: str = "outputs/goal_projection.png",
):
    """
    2-panel goal projection chart:
      Panel 1: Corpus growth (invested vs corpus vs target)
      Panel 2: Cumulative gain bars
    """
    if yearly.empty:
        return

    fig, axes = plt.subplots(1, 2, figsize=(14, 6), facecolor="#0d1117")

    ax = axes[0]
    corpus = yearly["total_corpus"] if "total_corpus" in yearly else yearly["corpus"]
    ax.fill_between(yearly["year"], yearly["invested"], corpus, alpha=0.25, color="#00ff88")
    ax.plot(yearly["year"], corpus, color="#00ff88", lw=2.5, label="Expected Corpus")
    ax.plot(yearly["year"], yearly["invested"], color="#ff6b35", lw=1.8, linestyle="--",
            label="Amount Invested")
    ax.axhline(projection["inflation_adjusted_target"], color="#ffe66d", linestyle=":", lw=1.5,
               label="Target")
    ax.set_title(f"{goal_name}\n{BUCKET_DISPLAY.get(projection['bucket'], '')} — Corpus Growth",
                 fontsize=11)
    ax.set_xlabel("Year")
    ax.set_ylabel("Rs.")
    ax.yaxis.set_major_formatter(plt.FuncFormatter(_rupees))
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)

    ax2 = axes[1]
    gains = yearly["gain"]
    ax2.bar(yearly["year"], gains / 1e5, color=["#00ff88" if g >= 0 else "#ff6b35" for g in gains],
            alpha=0.85, edgecolor="#21262d")
    ax2.set_title("Cumulative Gain Over Time", fontsize=11)
    ax2.set_xlabel("Year")
    ax2.set_ylabel("Gain (Rs. Lakh)")
    ax2.grid(True, axis="y", alpha=0.3)

    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches="tight", facecolor="#0d1117")
    plt.close()
    print(f"  ✓ Saved: {save_path}")
