"""Activity advice derived from a day's temperature, rain chance and conditions."""

MAX_DAILY_RECOMMENDATIONS = 3

_CONDITION_ADVICE = {
    "clear": "Excellent weather for outdoor photography",
    "clouds": "Good weather for most activities",
    "rain": "Rain expected - plan indoor activities",
    "snow": "Snow conditions - check road and transport status",
    "thunderstorm": "Thunderstorms possible - stay indoors during storms",
}


def daily_recommendations(
    temp_c: float, precipitation_pct: float, conditions: str | None
) -> list[str]:
    """Up to three recommendations for one day.

    Args:
        temp_c: Representative temperature (midday where available)
        precipitation_pct: Chance of precipitation, 0-100
        conditions: Condition group such as "Clear", "Clouds" or "Rain"
    """
    advice: list[str] = []

    if temp_c >= 30:
        advice.append("Stay hydrated and wear light clothing")
        advice.append("Plan indoor activities during peak heat")
    elif temp_c >= 25:
        advice.append("Perfect weather for outdoor activities")
    elif temp_c >= 15:
        advice.append("Comfortable weather for sightseeing")
    elif temp_c >= 5:
        advice.append("Cool weather - bring a light jacket")
    else:
        advice.append("Cold weather - dress warmly")

    if precipitation_pct > 70:
        advice.append("High chance of rain - pack an umbrella")
        advice.append("Consider indoor alternatives for outdoor activities")
    elif precipitation_pct > 40:
        advice.append("Possible rain - check weather before outdoor plans")

    condition_line = _CONDITION_ADVICE.get((conditions or "").lower())
    if condition_line:
        advice.append(condition_line)

    return advice[:MAX_DAILY_RECOMMENDATIONS]
