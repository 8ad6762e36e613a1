# registry/malawi_data.py
"""Reference data for Malawi: districts and land-use categories."""

MALAWI_DISTRICTS = [
    "Balaka", "Blantyre", "Chikwawa", "Chiradzulu", "Chitipa", "Dedza",
    "Dowa", "Karonga", "Kasungu", "Likoma", "Lilongwe", "Machinga",
    "Mangochi", "Mchinji", "Mulanje", "Mwanza", "Mzimba", "Neno",
    "Nkhata Bay", "Nkhotakota", "Nsanje", "Ntcheu", "Ntchisi", "Phalombe",
    "Rumphi", "Salima", "Thyolo", "Zomba",
]

LAND_USES = [
    "Residential", "Commercial", "Agricultural", "Industrial",
    "Mixed Use", "Institutional", "Recreational",
]

# Approximate district headquarters (lat, lng), used for seeding sample data
DISTRICT_CENTROIDS = {
    "Balaka": (-14.9888, 34.9559),
    "Blantyre": (-15.7861, 35.0058),
    "Chikwawa": (-16.0350, 34.8009),
    "Chiradzulu": (-15.6746, 35.1407),
    "Chitipa": (-9.7024, 33.2697),
    "Dedza": (-14.3779, 34.3332),
    "Dowa": (-13.6541, 33.9379),
    "Karonga": (-9.9333, 33.9333),
    "Kasungu": (-13.0333, 33.4833),
    "Likoma": (-12.0667, 34.7333),
    "Lilongwe": (-13.9626, 33.7741),
    "Machinga": (-14.9667, 35.5167),
    "Mangochi": (-14.4782, 35.2645),
    "Mchinji": (-13.7984, 32.8802),
    "Mulanje": (-16.0316, 35.5000),
    "Mwanza": (-15.6026, 34.5247),
    "Mzimba": (-11.9000, 33.6000),
    "Neno": (-15.3981, 34.6534),
    "Nkhata Bay": (-11.6066, 34.2907),
    "Nkhotakota": (-12.9274, 34.2961),
    "Nsanje": (-16.9200, 35.2620),
    "Ntcheu": (-14.8203, 34.6359),
    "Ntchisi": (-13.3753, 33.9149),
    "Phalombe": (-15.8063, 35.6533),
    "Rumphi": (-11.0186, 33.8574),
    "Salima": (-13.7804, 34.4587),
    "Thyolo": (-16.0677, 35.1405),
    "Zomba": (-15.3860, 35.3188),
}

DISTRICT_CHOICES = [(d, d) for d in MALAWI_DISTRICTS]
LAND_USE_CHOICES = [(u, u) for u in LAND_USES]
