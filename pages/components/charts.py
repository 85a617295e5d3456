"""Chart components using Plotly for data visualization."""

import plotly.graph_objects as go
import plotly.express as px
import pandas as pd
from calorie_tracker.models import MacroTargets
from calorie_tracker.tracker import totals_by_date


def _empty_chart(message: str):
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper", yref="paper",
        x=0.5, y=0.5, showarrow=False
    )
    return fig


def create_macro_pie_chart(targets: MacroTargets):
    """Create pie chart of macro calorie distribution.

    Args:
        targets: MacroTargets object with protein, carbs, fat in grams

    Returns:
        Plotly figure
    """
    if targets.has_carb_deficit:
        return _empty_chart("Protein and fat targets exceed your TDEE")

    labels = ['Protein', 'Carbs', 'Fat']
    values = [
        targets.protein_g * 4,  # 4 cal/g
        targets.carbs_g * 4,    # 4 cal/g
        targets.fat_g * 9       # 9 cal/g
    ]

    fig = px.pie(
        names=labels,
        values=values,
        title="Macro Calorie Distribution",
        color_discrete_sequence=['#FF6B6B', '#4ECDC4', '#FFE66D']
    )

    fig.update_traces(textposition='inside', textinfo='percent+label')

    return fig


def create_progress_gauge(actual: float, target: float, pct: int, label: str):
    """Create gauge chart showing how much of a daily target has been eaten.

    Args:
        actual: Amount consumed so far
        target: Daily target
        pct: Progress percentage (0-100)
        label: Metric label (e.g., "Calories", "Protein")

    Returns:
        Plotly figure
    """
    color = "darkgreen" if pct >= 100 else "#4ECDC4"

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=pct,
        number={'suffix': '%'},
        title={'text': f"{label}<br><span style='font-size:0.8em'>{actual:.0f} / {target:.0f}</span>"},
        gauge={
            'axis': {'range': [0, 100]},
            'bar': {'color': color},
        }
    ))

    return fig


def create_weight_trend(weight_history: list):
    """Create line chart of body weight over time.

    Args:
        weight_history: List of WeightEntry objects

    Returns:
        Plotly figure
    """
    if not weight_history:
        return _empty_chart("No weight data available yet")

    df = pd.DataFrame(
        [(e.entry_date, e.weight_lbs) for e in weight_history],
        columns=['Date', 'Weight'],
    )
    df = df.sort_values('Date')

    fig = px.line(
        df,
        x='Date',
        y='Weight',
        title='Weight Progress',
        markers=True
    )

    fig.update_layout(
        xaxis_title="Date",
        yaxis_title="Weight (lbs)",
        hovermode='x unified'
    )

    return fig


def create_streak_chart(streak: list):
    """Create bar chart of which of the last days had food logged.

    Args:
        streak: List of (date, logged) tuples, oldest first

    Returns:
        Plotly figure
    """
    df = pd.DataFrame(streak, columns=['Date', 'Logged'])
    df['Day'] = df['Date'].apply(lambda d: d.strftime('%a'))

    fig = go.Figure(go.Bar(
        x=df['Day'],
        y=[1] * len(df),
        marker_color=['#4CAF50' if logged else '#E53935' for logged in df['Logged']],
        hovertext=[d.isoformat() for d in df['Date']],
    ))

    fig.update_layout(
        title='Logging Streak',
        yaxis={'visible': False},
        showlegend=False
    )

    return fig


def create_daily_calories_trend(entries: list, tdee: float = None):
    """Create line chart of daily calories over time.

    Args:
        entries: List of FoodEntry objects
        tdee: Optional daily target for a reference line

    Returns:
        Plotly figure
    """
    data = totals_by_date(entries)
    if not data:
        return _empty_chart("No food logged")

    df = pd.DataFrame(
        [(d, n.calories) for d, n in data.items()],
        columns=['Date', 'Calories'],
    )

    fig = px.line(
        df,
        x='Date',
        y='Calories',
        title='Daily Calorie Intake',
        markers=True
    )

    fig.update_layout(
        xaxis_title="Date",
        yaxis_title="Calories (kcal)",
        hovermode='x unified'
    )

    if tdee:
        fig.add_hline(
            y=tdee,
            line_dash="dash",
            annotation_text="TDEE",
            line_color="red"
        )

    return fig
