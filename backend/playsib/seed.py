from playsib.models import Question

# (text, options, answer) per wheel segment, in Config.CATEGORIES order
STARTER_QUESTIONS = [
    [
        ("Which estate did merchants belong to in the Russian Empire?",
         ["Nobility", "Clergy", "Merchant estate", "Peasantry"], "Merchant estate"),
        ("How many merchant guilds existed for most of the 19th century?",
         ["One", "Two", "Three", "Five"], "Three"),
    ],
    [
        ("Which room of a merchant house was kept for receiving guests?",
         ["The parlour", "The cellar", "The stable", "The storeroom"], "The parlour"),
        ("What was traditionally brewed in a samovar?",
         ["Kvass", "Water for tea", "Beer", "Soup"], "Water for tea"),
    ],
    [
        ("What usually passed from father to son in a merchant dynasty?",
         ["The family firm", "A noble title", "A church office", "A military rank"], "The family firm"),
        ("Merchants often funded which kind of public building?",
         ["Churches and schools", "Fortresses", "Prisons", "Mints"], "Churches and schools"),
    ],
    [
        ("On which river does Tomsk stand?",
         ["Ob", "Tom", "Irtysh", "Yenisei"], "Tom"),
        ("In which year was Tomsk founded?",
         ["1604", "1703", "1582", "1804"], "1604"),
    ],
    [
        ("What did a merchant need to buy each year to trade legally?",
         ["A guild certificate", "A passport", "A ship", "A land grant"], "A guild certificate"),
        ("Which goods moved west from Siberia in large quantities?",
         ["Furs", "Cotton", "Coffee", "Silk"], "Furs"),
    ],
]


def seed_questions(session, categories) -> int:
    """Insert the starter question bank. Returns the number of rows added."""
    count = 0
    for category, rows in zip(categories, STARTER_QUESTIONS):
        for text, options, answer in rows:
            session.add(Question(category=category, text=text, options=options, answer=answer))
            count += 1
    session.commit()
    return count
