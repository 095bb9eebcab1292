"""CSV documents shared by the test modules."""

SAMPLE_CSV = """Nom,Description,Besoin,Technologie,Tranche d'âge,Handicap,Langue,Prix,Localisation,Site,Image
Café Accessibilité,Lieu adapté,Mobilité,Application,Adulte,Moteur,"Français, Anglais",Gratuit,France,https://cafe.example.org,https://cafe.example.org/logo.png
écran Braille,Afficheur tactile,Vision,Matériel,"Adulte, Enfant",Visuel,Français,Payant,Canada,,
Beta,Robot d'assistance,Vision,Robot,Enfant,Visuel,Anglais,Payant,France,,
,,,,,,,,,,
Alpha,,Mobilité,,Adulte,Moteur,Français,Gratuit,Belgique,,
"""

SCENARIO_CSV = """Nom,Besoin,Technologie
Alpha,Mobilité,
Beta,Vision,Robot
Gamma,Mobilité,Robot
"""
