"""Curated locker locations served when every network tier is unavailable."""

from __future__ import annotations

from ..models.domain import LockerLocation

# Hand-verified retail sites hosting lockers; keep this list non-empty.
_STATIC_LOCKERS: tuple[LockerLocation, ...] = (
    # Gauteng
    LockerLocation(
        id="gauteng_sandton_city",
        name="Pick n Pay Sandton City",
        address="83 Rivonia Road, Sandton City Shopping Centre",
        city="Sandton",
        province="Gauteng",
        postal_code="2196",
        latitude=-26.1076,
        longitude=28.0567,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="011 784 7000",
    ),
    LockerLocation(
        id="gauteng_menlyn_park",
        name="Woolworths Menlyn Park",
        address="Menlyn Park Shopping Centre, Pretoria",
        city="Pretoria",
        province="Gauteng",
        postal_code="0181",
        latitude=-25.7852,
        longitude=28.2761,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="012 348 4000",
    ),
    LockerLocation(
        id="gauteng_eastgate",
        name="Checkers Eastgate",
        address="Eastgate Shopping Centre, Bedfordview",
        city="Johannesburg",
        province="Gauteng",
        postal_code="2008",
        latitude=-26.1877,
        longitude=28.1349,
        opening_hours="Mon-Sun: 7:00-21:00",
        contact_number="011 450 9000",
    ),
    LockerLocation(
        id="gauteng_rosebank_mall",
        name="Woolworths Rosebank",
        address="50 Bath Avenue, Rosebank Mall",
        city="Johannesburg",
        province="Gauteng",
        postal_code="2196",
        latitude=-26.1440,
        longitude=28.0407,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="011 447 5000",
    ),
    LockerLocation(
        id="gauteng_fourways_mall",
        name="Pick n Pay Fourways",
        address="Fourways Mall, Johannesburg",
        city="Johannesburg",
        province="Gauteng",
        postal_code="2055",
        latitude=-25.9889,
        longitude=28.0103,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="011 465 9000",
    ),
    LockerLocation(
        id="gauteng_clicks_cresta",
        name="Clicks Cresta",
        address="Cresta Shopping Centre, Johannesburg",
        city="Johannesburg",
        province="Gauteng",
        postal_code="2194",
        latitude=-26.1089,
        longitude=27.9616,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="011 678 0000",
    ),
    LockerLocation(
        id="gauteng_dischem_clearwater",
        name="Dis-Chem Clearwater",
        address="Clearwater Mall, Johannesburg",
        city="Johannesburg",
        province="Gauteng",
        postal_code="1709",
        latitude=-26.0378,
        longitude=27.8893,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="011 675 0000",
    ),
    LockerLocation(
        id="gauteng_spar_northgate",
        name="Spar Northgate",
        address="Northgate Shopping Centre, Johannesburg",
        city="Johannesburg",
        province="Gauteng",
        postal_code="2188",
        latitude=-26.0461,
        longitude=28.0227,
        opening_hours="Mon-Sun: 7:00-21:00",
        contact_number="011 794 0000",
    ),
    LockerLocation(
        id="gauteng_game_southgate",
        name="Game Southgate",
        address="Southgate Shopping Centre, Johannesburg",
        city="Johannesburg",
        province="Gauteng",
        postal_code="2091",
        latitude=-26.2686,
        longitude=27.9786,
        opening_hours="Mon-Sun: 9:00-18:00",
        contact_number="011 942 0000",
    ),
    # Western Cape
    LockerLocation(
        id="western_cape_canal_walk",
        name="Woolworths Canal Walk",
        address="Canal Walk Shopping Centre, Century City",
        city="Cape Town",
        province="Western Cape",
        postal_code="7441",
        latitude=-33.8876,
        longitude=18.5104,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="021 555 1234",
    ),
    LockerLocation(
        id="western_cape_vna_waterfront",
        name="Pick n Pay V&A Waterfront",
        address="Victoria & Alfred Waterfront",
        city="Cape Town",
        province="Western Cape",
        postal_code="8001",
        latitude=-33.9022,
        longitude=18.4186,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="021 408 7600",
    ),
    LockerLocation(
        id="western_cape_tyger_valley",
        name="Checkers Tyger Valley",
        address="Tyger Valley Shopping Centre, Bellville",
        city="Cape Town",
        province="Western Cape",
        postal_code="7530",
        latitude=-33.9144,
        longitude=18.6276,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="021 914 8000",
    ),
    LockerLocation(
        id="western_cape_cavendish",
        name="Woolworths Cavendish",
        address="Cavendish Square, Claremont",
        city="Cape Town",
        province="Western Cape",
        postal_code="7708",
        latitude=-33.9648,
        longitude=18.4641,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="021 657 5000",
    ),
    LockerLocation(
        id="western_cape_clicks_gardens",
        name="Clicks Gardens Centre",
        address="Gardens Centre, Cape Town",
        city="Cape Town",
        province="Western Cape",
        postal_code="8001",
        latitude=-33.9356,
        longitude=18.4142,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="021 465 1000",
    ),
    # KwaZulu-Natal
    LockerLocation(
        id="kzn_gateway",
        name="Gateway Theatre of Shopping",
        address="1 Palm Boulevard, Umhlanga Ridge",
        city="Durban",
        province="KwaZulu-Natal",
        postal_code="4319",
        latitude=-29.7294,
        longitude=31.0785,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="031 566 0000",
    ),
    LockerLocation(
        id="kzn_pavilion",
        name="Woolworths Pavilion",
        address="Pavilion Shopping Centre, Westville",
        city="Durban",
        province="KwaZulu-Natal",
        postal_code="3629",
        latitude=-29.8258,
        longitude=30.9186,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="031 265 0300",
    ),
    LockerLocation(
        id="kzn_la_lucia",
        name="Pick n Pay La Lucia",
        address="La Lucia Mall, Durban",
        city="Durban",
        province="KwaZulu-Natal",
        postal_code="4051",
        latitude=-29.7647,
        longitude=31.0892,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="031 572 0000",
    ),
    # Eastern Cape
    LockerLocation(
        id="eastern_cape_greenacres",
        name="Pick n Pay Greenacres",
        address="Greenacres Shopping Centre, Port Elizabeth",
        city="Port Elizabeth",
        province="Eastern Cape",
        postal_code="6045",
        latitude=-33.9648,
        longitude=25.5999,
        opening_hours="Mon-Sun: 8:00-20:00",
        contact_number="041 363 2000",
    ),
    LockerLocation(
        id="eastern_cape_hemingways",
        name="Woolworths Hemingways",
        address="Hemingways Mall, East London",
        city="East London",
        province="Eastern Cape",
        postal_code="5247",
        latitude=-32.9833,
        longitude=27.8711,
        opening_hours="Mon-Sun: 9:00-21:00",
        contact_number="043 726 8000",
    ),
)


def get_static_lockers() -> tuple[LockerLocation, ...]:
    """Return the curated fallback list (never empty)."""
    return _STATIC_LOCKERS
